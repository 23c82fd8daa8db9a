import pytest

from apps.activity_log.services import build_indices

from .factories import sample_snapshot


@pytest.fixture
def snapshot():
    return sample_snapshot()


@pytest.fixture
def indices(snapshot):
    projects, profiles, activities = snapshot
    return build_indices(projects, profiles, activities)
