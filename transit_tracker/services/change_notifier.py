# path: transit-tracker/transit_tracker/services/change_notifier.py
"""
Live project updates over the store's realtime websocket.

Speaks the Phoenix channel protocol used by Supabase Realtime: join a
`postgres_changes` channel for every event on the projects table, keep the
socket alive with heartbeats, and on each change reload the full project list
through the normal fallback chain. The caller owns the returned subscription
and must close it.
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union
from urllib.parse import urlencode, urlparse

import aiohttp

from transit_tracker.config import Settings, settings
from transit_tracker.logging_config import get_logger
from transit_tracker.models.project_models import Project
from transit_tracker.services import project_loader

logger = get_logger(__name__)

ProjectsCallback = Callable[[List[Project]], Union[None, Awaitable[None]]]

CHANNEL_NAME = "transit_projects_changes"
HEARTBEAT_INTERVAL_S = 25.0
CHANGE_EVENT = "postgres_changes"


def realtime_url(store_url: str, key: str) -> str:
    parsed = urlparse(store_url)
    scheme = "wss" if parsed.scheme == "https" else "ws"
    query = urlencode({"apikey": key, "vsn": "1.0.0"})
    return f"{scheme}://{parsed.netloc}/realtime/v1/websocket?{query}"


class ProjectSubscription:
    """A standing change subscription; call close() to release it."""

    def __init__(self, cfg: Settings, callback: ProjectsCallback, heartbeat_s: float = HEARTBEAT_INTERVAL_S):
        self._cfg = cfg
        self._callback = callback
        self._heartbeat_s = heartbeat_s
        self._refs = itertools.count(1)
        self._topic = f"realtime:{CHANNEL_NAME}"
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def join_message(self) -> Dict[str, Any]:
        ref = str(next(self._refs))
        return {
            "topic": self._topic,
            "event": "phx_join",
            "payload": {
                "config": {
                    "broadcast": {"self": False},
                    "presence": {"key": ""},
                    "postgres_changes": [
                        {"event": "*", "schema": "public", "table": self._cfg.PROJECTS_TABLE},
                    ],
                },
                "access_token": self._cfg.SUPABASE_ANON_KEY,
            },
            "ref": ref,
            "join_ref": ref,
        }

    def heartbeat_message(self) -> Dict[str, Any]:
        return {"topic": "phoenix", "event": "heartbeat", "payload": {}, "ref": str(next(self._refs))}

    def start(self) -> "ProjectSubscription":
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            self._task.add_done_callback(self._task_done)
        return self

    def _task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                f"Realtime subscription stopped: {error!r}",
                exc_info=error,
                extra={"error_type": "realtime", "table": self._cfg.PROJECTS_TABLE},
            )

    async def close(self) -> None:
        self._closed = True
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            # Failures are reported by _task_done
            await asyncio.gather(task, return_exceptions=True)
        logger.info("Realtime subscription closed", extra={"event": "unsubscribe", "table": self._cfg.PROJECTS_TABLE})

    async def handle_message(self, message: Dict[str, Any]) -> bool:
        """Process one channel message; True when it triggered a reload."""
        event = message.get("event")
        if event == CHANGE_EVENT and message.get("topic") == self._topic:
            change = (message.get("payload") or {}).get("data") or {}
            logger.info(
                f"Realtime update received: {change.get('type', 'change')}",
                extra={"event": CHANGE_EVENT, "table": self._cfg.PROJECTS_TABLE},
            )
            result = await project_loader.get_transit_projects(self._cfg)
            await self._deliver(result.projects)
            return True
        if event == "phx_reply" and (message.get("payload") or {}).get("status") == "error":
            logger.error(
                f"Realtime channel error: {message.get('payload')}",
                extra={"event": "phx_reply", "error_type": "realtime"},
            )
        return False

    async def _deliver(self, projects: List[Project]) -> None:
        try:
            maybe_awaitable = self._callback(projects)
            if inspect.isawaitable(maybe_awaitable):
                await maybe_awaitable
        except Exception:
            logger.exception("Project update callback failed", extra={"error_type": "callback"})

    async def _heartbeat(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        while not ws.closed:
            await asyncio.sleep(self._heartbeat_s)
            try:
                await ws.send_json(self.heartbeat_message())
            except (aiohttp.ClientError, ConnectionError, RuntimeError) as e:
                logger.warning(f"Realtime heartbeat failed: {e!r}", extra={"error_type": "realtime"})
                return

    async def _run(self) -> None:
        url = realtime_url(self._cfg.SUPABASE_URL, self._cfg.SUPABASE_ANON_KEY)
        async with aiohttp.ClientSession() as session:
            try:
                async with session.ws_connect(url) as ws:
                    await ws.send_json(self.join_message())
                    logger.info(
                        "Realtime subscription established",
                        extra={"event": "subscribe", "table": self._cfg.PROJECTS_TABLE},
                    )
                    heartbeat = asyncio.create_task(self._heartbeat(ws))
                    try:
                        async for msg in ws:
                            if msg.type == aiohttp.WSMsgType.TEXT:
                                try:
                                    message = json.loads(msg.data)
                                except ValueError:
                                    logger.warning("Ignoring non-JSON realtime frame", extra={"error_type": "realtime"})
                                    continue
                                await self.handle_message(message)
                            elif msg.type in (aiohttp.WSMsgType.ERROR, aiohttp.WSMsgType.CLOSED):
                                break
                    finally:
                        heartbeat.cancel()
                        await asyncio.gather(heartbeat, return_exceptions=True)
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                logger.error(f"Realtime connection failed: {e!r}", extra={"error_type": "realtime"})
                return
        if not self._closed:
            logger.warning("Realtime connection ended", extra={"event": "disconnect"})


def subscribe_to_project_updates(
    callback: ProjectsCallback,
    cfg: Optional[Settings] = None,
) -> Optional[ProjectSubscription]:
    """
    Start a change subscription; must be called from a running event loop.

    Returns None when the remote store is not configured.
    """
    cfg = cfg or settings
    if not cfg.has_valid_store_config:
        logger.warning("Remote store not available for real-time updates")
        return None
    return ProjectSubscription(cfg, callback).start()
