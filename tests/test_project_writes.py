import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from conftest import make_project
from transit_tracker.errors import StoreError, StoreWriteError
from transit_tracker.models.project_models import ProjectCreate, ProjectStatus, ProjectType
from transit_tracker.services.project_writes import (
    create_transit_project,
    delete_transit_project,
    get_project_statistics,
    update_project_progress,
)
from transit_tracker.services.sources.remote_store import ProjectStore


def new_project() -> ProjectCreate:
    return ProjectCreate(
        name="Waterfront East LRT",
        status=ProjectStatus.PLANNED,
        progress_percentage=0,
        budget_total="$2.0B",
        estimated_completion="2033",
        project_type=ProjectType.LRT,
        length="5 km",
        stations=9,
        description="Queens Quay extension",
        coordinates=[(-79.37, 43.64), (-79.35, 43.645)],
    )


def stored_row(**overrides):
    row = make_project(42, "Waterfront East LRT").model_dump(mode="json")
    row.update(overrides)
    return row


### demo mode (no store configured)


def test_demo_update_returns_sample_project(offline_settings):
    project = asyncio.run(update_project_progress(2, 99, offline_settings))
    assert project.name == "Eglinton Crosstown LRT"
    assert asyncio.run(update_project_progress(999, 10, offline_settings)) is None


def test_demo_create_assigns_id(offline_settings):
    project = asyncio.run(create_transit_project(new_project(), offline_settings))
    assert project.id > 0
    assert project.name == "Waterfront East LRT"
    assert project.created_at == project.updated_at


def test_demo_delete(offline_settings):
    assert asyncio.run(delete_transit_project(1, offline_settings)) is True


def test_demo_statistics(offline_settings):
    stats = asyncio.run(get_project_statistics(offline_settings))
    assert stats.total == 5
    assert stats.by_status == {"Planned": 0, "In Progress": 4, "Delayed": 1, "Completed": 0}
    assert stats.by_type == {"Subway": 1, "LRT": 3, "GO Rail": 1}


def test_progress_out_of_range_rejected(offline_settings):
    with pytest.raises(ValueError):
        asyncio.run(update_project_progress(1, 101, offline_settings))


### against the store


def test_update_sends_progress(store_settings):
    update = AsyncMock(return_value=stored_row(progress_percentage=60))
    with patch.object(ProjectStore, "update", update):
        project = asyncio.run(update_project_progress(42, 60, store_settings))
    assert project.progress_percentage == 60
    project_id, values = update.await_args.args
    assert project_id == 42
    assert values["progress_percentage"] == 60
    assert "updated_at" in values


def test_update_unknown_id_returns_none(store_settings):
    with patch.object(ProjectStore, "update", AsyncMock(return_value=None)):
        assert asyncio.run(update_project_progress(7, 60, store_settings)) is None


def test_update_failure_is_raised(store_settings):
    with patch.object(ProjectStore, "update", AsyncMock(side_effect=StoreError("HTTP 500", 500))):
        with pytest.raises(StoreWriteError) as excinfo:
            asyncio.run(update_project_progress(42, 60, store_settings))
    assert excinfo.value.status_code == 500


def test_create_inserts_with_timestamps(store_settings):
    insert = AsyncMock(return_value=stored_row())
    with patch.object(ProjectStore, "insert", insert):
        project = asyncio.run(create_transit_project(new_project(), store_settings))
    assert project.id == 42
    values = insert.await_args.args[0]
    assert values["project_type"] == "LRT"
    assert values["coordinates"] == [[-79.37, 43.64], [-79.35, 43.645]]
    assert "created_at" in values and "updated_at" in values
    assert "id" not in values


def test_create_failure_is_raised(store_settings):
    with patch.object(ProjectStore, "insert", AsyncMock(side_effect=StoreError("HTTP 409", 409))):
        with pytest.raises(StoreWriteError):
            asyncio.run(create_transit_project(new_project(), store_settings))


def test_delete_failure_is_raised(store_settings):
    with patch.object(ProjectStore, "delete", AsyncMock(side_effect=StoreError("HTTP 403", 403))):
        with pytest.raises(StoreWriteError):
            asyncio.run(delete_transit_project(42, store_settings))


def test_store_statistics(store_settings):
    rows = [
        {"status": "In Progress", "project_type": "LRT"},
        {"status": "In Progress", "project_type": "Subway"},
        {"status": "Completed", "project_type": "LRT"},
    ]
    with patch.object(ProjectStore, "select", AsyncMock(return_value=rows)):
        stats = asyncio.run(get_project_statistics(store_settings))
    assert stats.total == 3
    assert stats.by_status == {"In Progress": 2, "Completed": 1}
    assert stats.by_type == {"LRT": 2, "Subway": 1}


def test_store_statistics_skips_non_object_rows(store_settings):
    rows = [{"status": "Planned", "project_type": "Subway"}, "Planned", None]
    with patch.object(ProjectStore, "select", AsyncMock(return_value=rows)):
        stats = asyncio.run(get_project_statistics(store_settings))
    assert stats.total == 1
    assert stats.by_status == {"Planned": 1}


@pytest.mark.parametrize("payload", ["not rows", {"status": "Planned"}])
def test_store_statistics_rejects_non_list_payload(store_settings, payload):
    with patch.object(ProjectStore, "select", AsyncMock(return_value=payload)):
        with pytest.raises(StoreError):
            asyncio.run(get_project_statistics(store_settings))
