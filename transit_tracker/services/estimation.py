# path: transit-tracker/transit_tracker/services/estimation.py
"""
Heuristic estimates for projects built from geometry-only files.

None of these numbers are measured. Progress is read off how complete the
drawn geometry is, status is read off that progress, budget is a flat rate
per kilometre. They exist so a geometry file can still be shown as a project;
swap them for real data feeds when one is available.

Type keywords match whole words only ("Chicago" is not a GO line), which is
stricter than a plain substring test.
"""

from __future__ import annotations

import re
import time
from typing import Optional, Union

from transit_tracker.models.project_models import ProjectStatus, ProjectType


BASE_PROGRESS = 30
STATION_PROGRESS_BONUS = 40
PLATFORM_PROGRESS_BONUS = 25
MAX_ESTIMATED_PROGRESS = 95

BUDGET_MILLIONS_PER_KM = 200

# Checked in order; first match wins.
_TYPE_KEYWORDS = (
    (re.compile(r"\bsubway\b", re.IGNORECASE), ProjectType.SUBWAY),
    (re.compile(r"\bgo\b", re.IGNORECASE), ProjectType.GO_RAIL),
    (re.compile(r"\blrt\b", re.IGNORECASE), ProjectType.LRT),
)


def synthetic_id() -> int:
    # Millisecond timestamp; two calls in the same millisecond collide.
    return int(time.time() * 1000)


def estimate_project_type(name: Optional[str], description: Optional[str]) -> ProjectType:
    for pattern, project_type in _TYPE_KEYWORDS:
        if (name and pattern.search(name)) or (description and pattern.search(description)):
            return project_type
    return ProjectType.LRT


def estimate_progress(has_stations: bool, has_platforms: bool) -> int:
    progress = BASE_PROGRESS
    if has_stations:
        progress += STATION_PROGRESS_BONUS
    if has_platforms:
        progress += PLATFORM_PROGRESS_BONUS
    return min(progress, MAX_ESTIMATED_PROGRESS)


def estimate_status(progress: int) -> ProjectStatus:
    # Nearly done but never 100 from geometry alone: read as schedule slip.
    if progress >= 95:
        return ProjectStatus.DELAYED
    if progress < 50:
        return ProjectStatus.PLANNED
    return ProjectStatus.IN_PROGRESS


def estimate_completion(progress: int) -> str:
    if progress >= 90:
        return "2024"
    if progress >= 60:
        return "2025"
    return "2026"


def estimate_budget(length_km: float) -> str:
    return f"${length_km * BUDGET_MILLIONS_PER_KM:.1f}M"


def format_length(length_km: float) -> str:
    return f"{length_km:.1f} km"


def id_from_metadata(raw_id: Optional[Union[str, int]]) -> int:
    """Digits of a metadata id ("line-5" -> 5), else a timestamp id."""
    if raw_id is None:
        return synthetic_id()
    digits = re.sub(r"\D", "", str(raw_id))
    parsed = int(digits) if digits else 0
    return parsed or synthetic_id()
