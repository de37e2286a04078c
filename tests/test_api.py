from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from conftest import make_project
from transit_tracker.errors import StoreWriteError
from transit_tracker.main import app
from transit_tracker.models.project_models import FetchResult, ProjectStatistics


ROUTES = "transit_tracker.api.routes.projects"

client = TestClient(app)


def test_list_projects():
    result = FetchResult(projects=[make_project(1, "Ontario Line")], source="static-files")
    with patch(f"{ROUTES}.get_transit_projects", AsyncMock(return_value=result)):
        resp = client.get("/projects")
    assert resp.status_code == 200
    body = resp.json()
    assert body["source"] == "static-files"
    assert body["projects"][0]["name"] == "Ontario Line"
    assert body["projects"][0]["coordinates"] == [[-79.4, 43.65], [-79.38, 43.66]]


def test_stats():
    stats = ProjectStatistics(total=1, by_status={"Planned": 1}, by_type={"LRT": 1})
    with patch(f"{ROUTES}.get_project_statistics", AsyncMock(return_value=stats)):
        resp = client.get("/projects/stats")
    assert resp.status_code == 200
    assert resp.json()["total"] == 1


def test_update_progress_unknown_project_is_404():
    with patch(f"{ROUTES}.update_project_progress", AsyncMock(return_value=None)):
        resp = client.patch("/projects/999/progress", json={"progress": 40})
    assert resp.status_code == 404


def test_update_progress_validates_range():
    resp = client.patch("/projects/1/progress", json={"progress": 140})
    assert resp.status_code == 422


def test_update_progress():
    update = AsyncMock(return_value=make_project(5))
    with patch(f"{ROUTES}.update_project_progress", update):
        resp = client.patch("/projects/5/progress", json={"progress": 40})
    assert resp.status_code == 200
    update.assert_awaited_once_with(5, 40)


def test_create_project():
    payload = make_project(0).model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
    with patch(f"{ROUTES}.create_transit_project", AsyncMock(return_value=make_project(77))):
        resp = client.post("/projects", json=payload)
    assert resp.status_code == 201
    assert resp.json()["id"] == 77


def test_write_failure_is_bad_gateway():
    with patch(f"{ROUTES}.delete_transit_project", AsyncMock(side_effect=StoreWriteError("HTTP 500", 500))):
        resp = client.delete("/projects/3")
    assert resp.status_code == 502


def test_delete_project():
    with patch(f"{ROUTES}.delete_transit_project", AsyncMock(return_value=True)):
        resp = client.delete("/projects/3")
    assert resp.status_code == 200
    assert resp.json() == {"deleted": True}
