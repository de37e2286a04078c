# path: transit-tracker/transit_tracker/services/sources/remote_store.py
"""
Remote project store (Supabase / PostgREST) client and read adapter.

The client is built lazily, once per configuration, and never at all when the
configuration fails validation.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from transit_tracker.config import Settings, settings
from transit_tracker.errors import StoreError
from transit_tracker.logging_config import get_logger
from transit_tracker.models.project_models import ConnectionStatus, Project
from transit_tracker.services.project_normalizer import normalize_row

logger = get_logger(__name__)


class ProjectStore:
    """Thin PostgREST client for the projects table."""

    def __init__(self, url: str, key: str, table: str, timeout_s: float):
        self.base_url = url.rstrip("/")
        self.table = table
        self.rest_url = f"{self.base_url}/rest/v1/{table}"
        self._key = key
        self._timeout = aiohttp.ClientTimeout(total=timeout_s)
        self._session: Optional[aiohttp.ClientSession] = None

    def matches(self, cfg: Settings) -> bool:
        return (
            self.base_url == cfg.SUPABASE_URL.rstrip("/")
            and self._key == cfg.SUPABASE_ANON_KEY
            and self.table == cfg.PROJECTS_TABLE
        )

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={
                    "apikey": self._key,
                    "Authorization": f"Bearer {self._key}",
                    "User-Agent": "transit-tracker/1.0",
                },
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(
        self,
        method: str,
        params: Optional[Dict[str, str]] = None,
        payload: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        headers = {"Prefer": prefer} if prefer else {}
        session = await self.get_session()
        try:
            async with session.request(method, self.rest_url, params=params, json=payload, headers=headers) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise StoreError(f"{method} {self.table} failed: HTTP {resp.status} {body[:200]}", resp.status)
                if resp.status == 204:
                    return None
                text = await resp.text()
                if not text:
                    return None
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise StoreError(f"{method} {self.table} failed: {str(e) or type(e).__name__}") from e

    async def test_connection(self) -> ConnectionStatus:
        # Count probe: one row at most, exact count in Content-Range.
        try:
            await self._request("GET", params={"select": "id", "limit": "1"}, prefer="count=exact")
        except StoreError as e:
            return ConnectionStatus(connected=False, error=str(e))
        return ConnectionStatus(connected=True)

    async def fetch_all(self) -> List[Dict[str, Any]]:
        rows = await self._request("GET", params={"select": "*", "order": "id"})
        return rows or []

    async def select(self, columns: str) -> List[Dict[str, Any]]:
        rows = await self._request("GET", params={"select": columns})
        return rows or []

    async def update(self, project_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        rows = await self._request(
            "PATCH", params={"id": f"eq.{project_id}"}, payload=values, prefer="return=representation"
        )
        return rows[0] if rows else None

    async def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._request("POST", payload=[values], prefer="return=representation")
        if not rows:
            raise StoreError(f"POST {self.table} returned no row")
        return rows[0]

    async def delete(self, project_id: int) -> None:
        await self._request("DELETE", params={"id": f"eq.{project_id}"}, prefer="return=minimal")


# Process-wide client; never constructed from an invalid configuration
_store: Optional[ProjectStore] = None


def get_project_store(cfg: Optional[Settings] = None) -> Optional[ProjectStore]:
    global _store
    cfg = cfg or settings
    if not cfg.has_valid_store_config:
        return None
    if _store is None or not _store.matches(cfg):
        _store = ProjectStore(cfg.SUPABASE_URL, cfg.SUPABASE_ANON_KEY, cfg.PROJECTS_TABLE, cfg.REMOTE_TIMEOUT_S)
    return _store


async def close_project_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None


async def load_remote_projects(
    cfg: Optional[Settings] = None,
) -> Tuple[List[Project], Optional[ConnectionStatus]]:
    """
    Read every project from the remote store.

    Returns (projects, connection_status). connection_status is None when the
    store was skipped for lack of configuration. Never raises for transport
    or payload problems; those come back as an empty list.
    """
    store = get_project_store(cfg)
    if store is None:
        logger.info("Remote store not configured - skipping", extra={"source": "remote"})
        return [], None

    status = await store.test_connection()
    if not status.connected:
        logger.warning(f"Remote store connection failed: {status.error}", extra={"source": "remote"})
        return [], status

    try:
        rows = await store.fetch_all()
    except StoreError as e:
        logger.error(
            f"Remote store query error: {e}",
            extra={"source": "remote", "error_type": "query", "status_code": e.status_code},
        )
        return [], ConnectionStatus(connected=True, error=str(e))

    projects: List[Project] = []
    for row in rows:
        try:
            projects.append(normalize_row(row))
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Skipping malformed project row: {e}",
                extra={"source": "remote", "error_type": "validation"},
            )

    if not projects:
        logger.warning("Remote store connected but no data found", extra={"source": "remote"})
    else:
        logger.info(
            f"Loaded {len(projects)} projects from remote store",
            extra={"source": "remote", "project_count": len(projects)},
        )
    return projects, status
