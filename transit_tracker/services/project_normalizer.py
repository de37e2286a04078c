# path: transit-tracker/transit_tracker/services/project_normalizer.py

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from transit_tracker.logging_config import get_logger
from transit_tracker.models.project_models import (
    ComplexGeometryFile,
    Project,
    ProjectStatus,
    ProjectType,
    RawFeature,
    RawGeometry,
    SimpleGeometryFile,
)
from transit_tracker.services import estimation
from transit_tracker.utils.geo import dedupe_consecutive, path_length_km

logger = get_logger(__name__)


TRACK_ROLE = "tracks"
STATION_ROLE = "station-label"
PLATFORM_ROLE = "station-platforms"

# Defaults for "simple" features that leave fields out
DEFAULT_NAME = "Unknown Project"
DEFAULT_STATUS = ProjectStatus.IN_PROGRESS
DEFAULT_PROGRESS = 50
DEFAULT_BUDGET = "$1.0B"
DEFAULT_COMPLETION = "2025"
DEFAULT_TYPE = ProjectType.LRT
DEFAULT_LENGTH = "10 km"
DEFAULT_STATIONS = 10
DEFAULT_DESCRIPTION = "Transit project description"

DEFAULT_LINE_NAME = "Unknown Transit Line"

# Spellings seen in source data that are not enum values
_TYPE_ALIASES = {
    "gorail": ProjectType.GO_RAIL,
    "go": ProjectType.GO_RAIL,
    "busrapidtransit": ProjectType.BUS_RAPID_TRANSIT,
    "brt": ProjectType.BUS_RAPID_TRANSIT,
    "lightrail": ProjectType.LRT,
}

GeometryFile = Union[SimpleGeometryFile, ComplexGeometryFile]


### Lenient field coercion


def coerce_status(value: Any, default: ProjectStatus = DEFAULT_STATUS) -> ProjectStatus:
    if isinstance(value, ProjectStatus):
        return value
    if isinstance(value, str):
        wanted = value.strip().lower()
        for status in ProjectStatus:
            if status.value.lower() == wanted:
                return status
    return default


def coerce_project_type(value: Any, default: ProjectType = DEFAULT_TYPE) -> ProjectType:
    if isinstance(value, ProjectType):
        return value
    if not isinstance(value, str) or not value.strip():
        return default
    wanted = value.strip().lower()
    for project_type in ProjectType:
        if project_type.value.lower() == wanted:
            return project_type
    key = wanted.replace(" ", "").replace("-", "").replace("_", "")
    return _TYPE_ALIASES.get(key, ProjectType.OTHER)


def coerce_text(value: Any, default: Optional[str] = None) -> Optional[str]:
    if isinstance(value, str):
        return value if value.strip() else default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def coerce_count(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError):
        return default


def clamp_progress(value: Any, default: int = DEFAULT_PROGRESS) -> int:
    if value is None:
        return default
    try:
        progress = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return max(0, min(100, progress))


def coordinate_pairs(points: Any) -> List[Tuple[float, float]]:
    """(lon, lat) pairs from a position list; extra dimensions and junk are dropped."""
    if not isinstance(points, (list, tuple)):
        return []
    coords = []
    for point in points:
        if isinstance(point, (list, tuple)) and len(point) >= 2:
            try:
                coords.append((float(point[0]), float(point[1])))
            except (TypeError, ValueError):
                continue
    return coords


def line_coordinates(geometry: Optional[RawGeometry]) -> List[Tuple[float, float]]:
    if geometry is None or geometry.type != "LineString":
        return []
    return coordinate_pairs(geometry.coordinates)


### Record shapes -> Project


def normalize_simple(feature: Union[RawFeature, Dict[str, Any]]) -> Project:
    if not isinstance(feature, RawFeature):
        feature = RawFeature.model_validate(feature if isinstance(feature, dict) else {})
    props = feature.properties

    return Project(
        id=estimation.id_from_metadata(props.id),
        name=coerce_text(props.name, DEFAULT_NAME),
        status=coerce_status(props.status),
        progress_percentage=clamp_progress(props.progressPercentage),
        budget_total=coerce_text(props.budgetTotal, DEFAULT_BUDGET),
        estimated_completion=coerce_text(props.estimatedCompletion, DEFAULT_COMPLETION),
        project_type=coerce_project_type(props.projectType),
        length=coerce_text(props.length, DEFAULT_LENGTH),
        stations=coerce_count(props.stations, DEFAULT_STATIONS),
        description=coerce_text(props.description, DEFAULT_DESCRIPTION),
        coordinates=line_coordinates(feature.geometry),
        color=coerce_text((props.model_extra or {}).get("color")),
    )


def normalize_complex(collection: Union[ComplexGeometryFile, Dict[str, Any]]) -> Optional[Project]:
    if not isinstance(collection, ComplexGeometryFile):
        collection = ComplexGeometryFile.model_validate(collection)
    metadata = collection.metadata
    name = coerce_text(metadata.name)
    description = coerce_text(metadata.description)

    tracks = [
        f for f in collection.features
        if f.properties.type == TRACK_ROLE and f.geometry is not None and f.geometry.type == "LineString"
    ]
    stations = [f for f in collection.features if f.properties.type == STATION_ROLE]
    has_platforms = any(f.properties.type == PLATFORM_ROLE for f in collection.features)

    if not tracks:
        logger.warning("No track features found in geometry file", extra={"error_type": "no_tracks"})
        return None

    all_coords: List[Tuple[float, float]] = []
    for feature in tracks:
        all_coords.extend(line_coordinates(feature.geometry))
    coords = dedupe_consecutive(all_coords)

    project_type = estimation.estimate_project_type(name, description)
    progress = estimation.estimate_progress(bool(stations), has_platforms)
    length_km = path_length_km(coords)

    return Project(
        id=estimation.id_from_metadata(metadata.id),
        name=name or description or DEFAULT_LINE_NAME,
        status=estimation.estimate_status(progress),
        progress_percentage=progress,
        budget_total=estimation.estimate_budget(length_km),
        estimated_completion=estimation.estimate_completion(progress),
        project_type=project_type,
        length=estimation.format_length(length_km),
        stations=len(stations),
        description=description or f"{project_type.value} line with {len(stations)} stations",
        coordinates=coords,
        color=coerce_text(metadata.color),
        metadata=metadata.model_dump(exclude_none=True),
    )


def normalize_row(row: Dict[str, Any]) -> Project:
    """Validate one remote store row; raises ValidationError on missing columns."""
    data = dict(row)
    data["status"] = coerce_status(data.get("status"))
    data["project_type"] = coerce_project_type(data.get("project_type"))
    data["progress_percentage"] = clamp_progress(data.get("progress_percentage"))
    data["coordinates"] = coordinate_pairs(data.get("coordinates"))
    return Project.model_validate(data)


### Geometry files


def parse_geometry_file(data: Any) -> GeometryFile:
    # Simple first; anything that is not exactly one id-carrying feature is complex.
    try:
        return SimpleGeometryFile.model_validate(data)
    except ValidationError:
        return ComplexGeometryFile.model_validate(data)


def normalize_geometry_file(data: Any) -> Optional[Project]:
    parsed = parse_geometry_file(data)
    if isinstance(parsed, SimpleGeometryFile):
        return normalize_simple(parsed.features[0])
    return normalize_complex(parsed)
