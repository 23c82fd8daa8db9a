"""
Tests for the settings split.
"""

from django.conf import settings


def test_debug_toolbar_is_development_only():
    assert 'debug_toolbar' not in settings.INSTALLED_APPS
    assert 'debug_toolbar.middleware.DebugToolbarMiddleware' not in settings.MIDDLEWARE


def test_development_settings_add_debug_toolbar():
    from config.settings import base, development

    assert 'debug_toolbar' in development.INSTALLED_APPS
    assert development.MIDDLEWARE[0] == 'debug_toolbar.middleware.DebugToolbarMiddleware'
    assert 'debug_toolbar' not in base.INSTALLED_APPS
    assert base.MIDDLEWARE[0] == 'django.middleware.security.SecurityMiddleware'
