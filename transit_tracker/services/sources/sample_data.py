# path: transit-tracker/transit_tracker/services/sources/sample_data.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from transit_tracker.models.project_models import Project, ProjectStatus, ProjectType


SAMPLE_TIMESTAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)

_SAMPLE_PROJECTS = [
    Project(
        id=1,
        name="Ontario Line",
        status=ProjectStatus.IN_PROGRESS,
        progress_percentage=35,
        budget_total="$19.0B",
        estimated_completion="2031",
        project_type=ProjectType.SUBWAY,
        length="15.6 km",
        stations=15,
        description="A new 15.6-kilometre subway line that will bring 15 new stations to Toronto.",
        coordinates=[
            (-79.4194, 43.6362),
            (-79.4, 43.645),
            (-79.3832, 43.6532),
            (-79.37, 43.66),
            (-79.35, 43.665),
            (-79.33, 43.67),
            (-79.31, 43.675),
            (-79.29, 43.68),
        ],
        created_at=SAMPLE_TIMESTAMP,
        updated_at=SAMPLE_TIMESTAMP,
    ),
    Project(
        id=2,
        name="Eglinton Crosstown LRT",
        status=ProjectStatus.DELAYED,
        progress_percentage=95,
        budget_total="$12.8B",
        estimated_completion="2024",
        project_type=ProjectType.LRT,
        length="19 km",
        stations=25,
        description="A 19-kilometre light rail transit line running along Eglinton Avenue.",
        coordinates=[(round(-79.5442 + 0.03 * i, 4), 43.7282) for i in range(13)],
        created_at=SAMPLE_TIMESTAMP,
        updated_at=SAMPLE_TIMESTAMP,
    ),
    Project(
        id=3,
        name="Finch West LRT",
        status=ProjectStatus.IN_PROGRESS,
        progress_percentage=85,
        budget_total="$2.5B",
        estimated_completion="2024",
        project_type=ProjectType.LRT,
        length="11 km",
        stations=18,
        description="An 11-kilometre light rail transit line along Finch Avenue West.",
        coordinates=[
            (-79.5, 43.76),
            (-79.47, 43.76),
            (-79.44, 43.76),
            (-79.41, 43.76),
            (-79.38, 43.76),
            (-79.35, 43.76),
        ],
        created_at=SAMPLE_TIMESTAMP,
        updated_at=SAMPLE_TIMESTAMP,
    ),
    Project(
        id=4,
        name="Lakeshore West Line",
        status=ProjectStatus.IN_PROGRESS,
        progress_percentage=45,
        budget_total="$2.1B",
        estimated_completion="2025",
        project_type=ProjectType.GO_RAIL,
        length="67 km",
        stations=12,
        description="Improvements to the Lakeshore West GO line for more frequent service.",
        coordinates=[
            (-79.3832, 43.6426),
            (-79.45, 43.63),
            (-79.52, 43.62),
            (-79.59, 43.61),
            (-79.66, 43.6),
            (-79.73, 43.59),
            (-79.8, 43.58),
        ],
        created_at=SAMPLE_TIMESTAMP,
        updated_at=SAMPLE_TIMESTAMP,
    ),
    Project(
        id=5,
        name="Hazel McCallion LRT",
        status=ProjectStatus.IN_PROGRESS,
        progress_percentage=65,
        budget_total="$4.6B",
        estimated_completion="2024",
        project_type=ProjectType.LRT,
        length="18 km",
        stations=18,
        description="An 18-kilometre light rail transit line through Mississauga.",
        coordinates=[(round(-79.64 + 0.005 * i, 4), round(43.55 + 0.02 * i, 4)) for i in range(9)],
        created_at=SAMPLE_TIMESTAMP,
        updated_at=SAMPLE_TIMESTAMP,
    ),
]


def get_sample_projects() -> List[Project]:
    # Deep copies so callers can mutate freely.
    return [p.model_copy(deep=True) for p in _SAMPLE_PROJECTS]


def find_sample_project(project_id: int) -> Project | None:
    for p in _SAMPLE_PROJECTS:
        if p.id == project_id:
            return p.model_copy(deep=True)
    return None
