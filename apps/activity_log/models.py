"""
Record store for projects, collaborator profiles and activity entries.

The models are the persistence side only. Aggregation, filtering and
export work on the immutable snapshot built by services.load_snapshot(),
never on querysets.
"""

from django.db import models
from django.conf import settings

from .records import Role, FALLBACK_COLOR


class Project(models.Model):
    """
    Time-boxed project collaborators log activities against.

    A project is considered ended once the current instant is past
    end_date at 23:59:59 local time.
    """

    title = models.CharField(max_length=200)
    subtitle = models.CharField(max_length=300, null=True, blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'project'
        verbose_name_plural = 'projects'
        ordering = ['title']

    def __str__(self):
        return self.title


class Profile(models.Model):
    """
    Collaborator profile.

    Roles:
    - Admin: manages projects and profiles, sees the dashboard
    - Collab: logs activities
    - Dashboard: reviews, filters and exports activities
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activity_profile',
    )
    email = models.EmailField('email address', unique=True)
    name = models.CharField(max_length=150, blank=True)
    color = models.CharField(
        max_length=7,
        default=FALLBACK_COLOR,
        help_text='Accent color used to identify the collaborator in reports'
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.COLLAB,
        db_index=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'profile'
        verbose_name_plural = 'profiles'
        ordering = ['name']

    def __str__(self):
        return self.name or self.email


class Activity(models.Model):
    """Free-text log entry authored by one profile on one project."""

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='activities',
    )
    user = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name='activities',
        help_text='Collaborator who logged the activity'
    )
    text = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = 'activity'
        verbose_name_plural = 'activities'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['project', '-created_at'], name='activity_lo_project_4c6c1e_idx'),
            models.Index(fields=['user', '-created_at'], name='activity_lo_user_id_8f2a7d_idx'),
        ]

    def __str__(self):
        return f"{self.project} - {self.user} ({self.created_at:%d/%m/%Y})"
