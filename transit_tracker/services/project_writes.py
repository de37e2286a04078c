# path: transit-tracker/transit_tracker/services/project_writes.py
"""
User-initiated mutations against the remote store, plus summary counts.

Unlike reads, failures here are raised (StoreWriteError). Without a store
configuration every operation runs in demo mode against the sample data and
touches nothing.
"""

from __future__ import annotations

from collections import Counter
from typing import Optional

from transit_tracker.config import Settings
from transit_tracker.errors import StoreError, StoreWriteError
from transit_tracker.logging_config import get_logger
from transit_tracker.models.project_models import (
    Project,
    ProjectCreate,
    ProjectStatistics,
    ProjectStatus,
    ProjectType,
    utcnow,
)
from transit_tracker.services import estimation
from transit_tracker.services.project_normalizer import normalize_row
from transit_tracker.services.sources import sample_data
from transit_tracker.services.sources.remote_store import get_project_store

logger = get_logger(__name__)


def _returned_project(row) -> Project:
    try:
        return normalize_row(row)
    except (TypeError, ValueError) as e:
        raise StoreWriteError(f"Store returned an unreadable project row: {e}") from e


async def update_project_progress(
    project_id: int,
    progress: int,
    cfg: Optional[Settings] = None,
) -> Optional[Project]:
    if not 0 <= progress <= 100:
        raise ValueError(f"progress out of range [0,100]: {progress}")

    store = get_project_store(cfg)
    if store is None:
        logger.info("Demo update - remote store not configured", extra={"source": "sample"})
        return sample_data.find_sample_project(project_id)

    try:
        row = await store.update(
            project_id,
            {"progress_percentage": progress, "updated_at": utcnow().isoformat()},
        )
    except StoreError as e:
        logger.error(f"Error updating project {project_id}: {e}", extra={"error_type": "write", "status_code": e.status_code})
        raise StoreWriteError(str(e), e.status_code) from e

    if row is None:
        return None
    logger.info(f"Updated project {project_id} progress to {progress}%", extra={"source": "remote"})
    return _returned_project(row)


async def create_transit_project(project: ProjectCreate, cfg: Optional[Settings] = None) -> Project:
    now = utcnow()
    store = get_project_store(cfg)
    if store is None:
        logger.info("Demo create - remote store not configured", extra={"source": "sample"})
        return Project(id=estimation.synthetic_id(), created_at=now, updated_at=now, **project.model_dump())

    values = project.model_dump(mode="json", exclude_none=True)
    values["created_at"] = now.isoformat()
    values["updated_at"] = now.isoformat()
    try:
        row = await store.insert(values)
    except StoreError as e:
        logger.error(f"Error creating transit project: {e}", extra={"error_type": "write", "status_code": e.status_code})
        raise StoreWriteError(str(e), e.status_code) from e

    created = _returned_project(row)
    logger.info(f"Created new project: {created.name}", extra={"source": "remote"})
    return created


async def delete_transit_project(project_id: int, cfg: Optional[Settings] = None) -> bool:
    store = get_project_store(cfg)
    if store is None:
        logger.info("Demo delete - remote store not configured", extra={"source": "sample"})
        return True

    try:
        await store.delete(project_id)
    except StoreError as e:
        logger.error(f"Error deleting project {project_id}: {e}", extra={"error_type": "write", "status_code": e.status_code})
        raise StoreWriteError(str(e), e.status_code) from e

    logger.info(f"Deleted project {project_id}", extra={"source": "remote"})
    return True


async def get_project_statistics(cfg: Optional[Settings] = None) -> ProjectStatistics:
    store = get_project_store(cfg)
    if store is None:
        projects = sample_data.get_sample_projects()
        by_status = Counter(p.status.value for p in projects)
        by_type = Counter(p.project_type.value for p in projects)
        # Demo mode reports every known status and the rail types, even at zero
        return ProjectStatistics(
            total=len(projects),
            by_status={s.value: by_status.get(s.value, 0) for s in ProjectStatus},
            by_type={
                t.value: by_type.get(t.value, 0)
                for t in (ProjectType.SUBWAY, ProjectType.LRT, ProjectType.GO_RAIL)
            },
        )

    try:
        rows = await store.select("status,project_type")
    except StoreError as e:
        logger.error(f"Error getting project statistics: {e}", extra={"error_type": "read", "status_code": e.status_code})
        raise

    if not isinstance(rows, list):
        logger.error("Unexpected statistics payload from remote store", extra={"error_type": "read", "source": "remote"})
        raise StoreError(f"Expected a list of rows, got {type(rows).__name__}")
    counted = [r for r in rows if isinstance(r, dict)]
    if len(counted) != len(rows):
        logger.warning(
            f"Skipping {len(rows) - len(counted)} malformed statistics rows",
            extra={"error_type": "validation", "source": "remote"},
        )

    return ProjectStatistics(
        total=len(counted),
        by_status=dict(Counter(str(r.get("status")) for r in counted)),
        by_type=dict(Counter(str(r.get("project_type")) for r in counted)),
    )
