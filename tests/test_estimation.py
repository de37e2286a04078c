import pytest

from transit_tracker.models.project_models import ProjectStatus, ProjectType
from transit_tracker.services import estimation


@pytest.mark.parametrize(
    "has_stations, has_platforms, expected",
    [(False, False, 30), (True, False, 70), (False, True, 55), (True, True, 95)],
)
def test_estimate_progress(has_stations, has_platforms, expected):
    assert estimation.estimate_progress(has_stations, has_platforms) == expected


def test_estimate_progress_never_exceeds_cap():
    for has_stations in (False, True):
        for has_platforms in (False, True):
            assert estimation.estimate_progress(has_stations, has_platforms) <= estimation.MAX_ESTIMATED_PROGRESS


@pytest.mark.parametrize(
    "progress, expected",
    [
        (95, ProjectStatus.DELAYED),
        (100, ProjectStatus.DELAYED),
        (40, ProjectStatus.PLANNED),
        (49, ProjectStatus.PLANNED),
        (50, ProjectStatus.IN_PROGRESS),
        (70, ProjectStatus.IN_PROGRESS),
    ],
)
def test_estimate_status(progress, expected):
    assert estimation.estimate_status(progress) == expected


def test_estimate_completion():
    assert estimation.estimate_completion(95) == "2024"
    assert estimation.estimate_completion(70) == "2025"
    assert estimation.estimate_completion(30) == "2026"


def test_budget_and_length_formatting():
    assert estimation.estimate_budget(15.6) == "$3120.0M"
    assert estimation.estimate_budget(0) == "$0.0M"
    assert estimation.format_length(18.04) == "18.0 km"


def test_project_type_keywords_in_order():
    # "subway" wins over "lrt" when both appear
    assert estimation.estimate_project_type("Subway and LRT", None) == ProjectType.SUBWAY
    assert estimation.estimate_project_type(None, "Regional GO expansion") == ProjectType.GO_RAIL
    assert estimation.estimate_project_type(None, None) == ProjectType.LRT


@pytest.mark.parametrize("raw, expected", [("line-5", 5), ("10", 10), (42, 42)])
def test_id_from_metadata(raw, expected):
    assert estimation.id_from_metadata(raw) == expected


def test_id_from_metadata_without_digits_uses_timestamp(monkeypatch):
    monkeypatch.setattr(estimation.time, "time", lambda: 1_700_000_000.5)
    assert estimation.id_from_metadata("abc") == 1_700_000_000_500
    assert estimation.id_from_metadata(None) == 1_700_000_000_500
    assert estimation.id_from_metadata("line-0") == 1_700_000_000_500
