# path: transit-tracker/transit_tracker/services/sources/static_files.py

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

import aiohttp

from transit_tracker.config import Settings, settings
from transit_tracker.errors import GeometryFileError
from transit_tracker.logging_config import get_logger
from transit_tracker.models.project_models import Project
from transit_tracker.services.project_normalizer import normalize_geometry_file

logger = get_logger(__name__)


def is_http_base(base: str) -> bool:
    return base.startswith(("http://", "https://"))


async def _fetch_http(url: str, filename: str, session: aiohttp.ClientSession) -> Any:
    try:
        async with session.get(url) as resp:
            if resp.status != 200:
                raise GeometryFileError(f"Failed to load {filename}: HTTP {resp.status}", filename, resp.status)
            return await resp.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise GeometryFileError(f"Error loading {filename}: {str(e) or type(e).__name__}", filename) from e
    except ValueError as e:
        raise GeometryFileError(f"Invalid JSON in {filename}: {e}", filename) from e


async def _read_local(path: Path, filename: str) -> Any:
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as e:
        raise GeometryFileError(f"Failed to load {filename}: {e.strerror or e}", filename) from e
    try:
        return json.loads(text)
    except ValueError as e:
        raise GeometryFileError(f"Invalid JSON in {filename}: {e}", filename) from e


async def fetch_geometry_file(
    filename: str,
    base: str,
    session: Optional[aiohttp.ClientSession] = None,
) -> Any:
    """Fetch and JSON-decode one geometry file; raises GeometryFileError."""
    if is_http_base(base):
        if session is None:
            raise GeometryFileError(f"No HTTP session for {filename}", filename)
        return await _fetch_http(f"{base.rstrip('/')}/{filename}", filename, session)
    return await _read_local(Path(base) / filename, filename)


async def load_geojson_projects(cfg: Optional[Settings] = None) -> List[Project]:
    """
    Normalize every file of the configured list, in order.

    A file that is missing, unreadable, malformed or has no track geometry is
    logged and skipped; the rest of the batch still loads.
    """
    cfg = cfg or settings
    session = None
    if is_http_base(cfg.GEOJSON_BASE):
        session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=cfg.STATIC_TIMEOUT_S))

    projects: List[Project] = []
    try:
        for filename in cfg.GEOJSON_FILES:
            logger.debug(f"Loading {filename}", extra={"source": "static-files", "geometry_file": filename})
            try:
                data = await fetch_geometry_file(filename, cfg.GEOJSON_BASE, session)
                project = normalize_geometry_file(data)
            except GeometryFileError as e:
                logger.warning(
                    str(e),
                    extra={"source": "static-files", "geometry_file": filename, "status_code": e.status_code},
                )
                continue
            except ValueError as e:
                # pydantic ValidationError: not a FeatureCollection at all
                logger.warning(
                    f"Malformed geometry file {filename}: {e}",
                    extra={"source": "static-files", "geometry_file": filename, "error_type": "validation"},
                )
                continue

            if project is None:
                logger.warning(
                    f"Dropped {filename}: no project could be built from it",
                    extra={"source": "static-files", "geometry_file": filename},
                )
                continue
            projects.append(project)
    finally:
        if session is not None:
            await session.close()

    logger.info(
        f"Processed {len(projects)} projects from geometry files",
        extra={"source": "static-files", "project_count": len(projects)},
    )
    return projects
