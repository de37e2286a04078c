# path: transit-tracker/transit_tracker/services/project_loader.py

from __future__ import annotations

from typing import List, Optional, Tuple

from transit_tracker.config import Settings, settings
from transit_tracker.logging_config import get_logger
from transit_tracker.models.project_models import ConnectionStatus, FetchResult, Project
from transit_tracker.services.sources import remote_store, sample_data, static_files

logger = get_logger(__name__)


async def _try_remote(cfg: Settings) -> Tuple[List[Project], Optional[ConnectionStatus]]:
    try:
        return await remote_store.load_remote_projects(cfg)
    except Exception as e:
        logger.exception(f"Remote store step failed: {e}", extra={"source": "remote", "error_type": "unexpected"})
        return [], ConnectionStatus(connected=False, error=str(e) or type(e).__name__)


async def _try_static_files(cfg: Settings) -> List[Project]:
    try:
        return await static_files.load_geojson_projects(cfg)
    except Exception as e:
        logger.exception(
            f"Geometry file step failed: {e}", extra={"source": "static-files", "error_type": "unexpected"}
        )
        return []


async def get_transit_projects(cfg: Optional[Settings] = None) -> FetchResult:
    """
    Load projects from the most trusted source that has any.

    Order: remote store (only with a valid configuration), static geometry
    files, built-in sample data. Steps run one at a time and the first
    non-empty list wins. Never raises; the sample step always has data.
    """
    cfg = cfg or settings
    logger.info("Loading transit projects")

    connection_status: Optional[ConnectionStatus] = None
    if cfg.has_valid_store_config:
        projects, connection_status = await _try_remote(cfg)
        if projects:
            return FetchResult(projects=projects, source="remote", connection_status=connection_status)
        logger.info("Falling back to geometry files", extra={"source": "static-files"})
    else:
        logger.info("Remote store not configured - using fallback data sources", extra={"source": "static-files"})

    projects = await _try_static_files(cfg)
    if projects:
        return FetchResult(projects=projects, source="static-files", connection_status=connection_status)

    logger.info("Using sample data as final fallback", extra={"source": "sample"})
    return FetchResult(
        projects=sample_data.get_sample_projects(),
        source="sample",
        connection_status=connection_status,
    )
