import pytest

from transit_tracker.config import Settings
from transit_tracker.models.project_models import Project, ProjectStatus, ProjectType
from transit_tracker.services.sources import remote_store


VALID_URL = "https://abcdefghijkl.supabase.co"
VALID_KEY = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.test-anon-key"


def make_settings(**overrides) -> Settings:
    values = {"SUPABASE_URL": "", "SUPABASE_ANON_KEY": ""}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_project(project_id: int, name: str = "Test Line") -> Project:
    return Project(
        id=project_id,
        name=name,
        status=ProjectStatus.IN_PROGRESS,
        progress_percentage=40,
        budget_total="$1.0B",
        estimated_completion="2027",
        project_type=ProjectType.LRT,
        length="5.0 km",
        stations=4,
        description="test",
        coordinates=[(-79.4, 43.65), (-79.38, 43.66)],
    )


@pytest.fixture
def offline_settings() -> Settings:
    return make_settings()


@pytest.fixture
def store_settings() -> Settings:
    return make_settings(SUPABASE_URL=VALID_URL, SUPABASE_ANON_KEY=VALID_KEY)


@pytest.fixture(autouse=True)
def reset_store_singleton():
    remote_store._store = None
    yield
    remote_store._store = None
