# path: transit-tracker/transit_tracker/config.py

from __future__ import annotations

from pathlib import Path
from typing import List
from urllib.parse import urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict

from transit_tracker.logging_config import get_logger

logger = get_logger(__name__)

PACKAGED_GEOJSON_DIR = Path(__file__).resolve().parent / "data" / "geojson"

DEFAULT_GEOJSON_FILES = [
    "ontario-line.geojson",
    "eglinton-crosstown.geojson",
    "finch-west-lrt.geojson",
    "lakeshore-west.geojson",
    "hazel-mccallion-lrt.geojson",
    "lakeshore-west-line.geojson",
    "hurontario-lrt.geojson",
]

ALLOWED_STORE_HOST_SUFFIX = ".supabase.co"
MIN_STORE_KEY_LENGTH = 20


def is_valid_store_url(url: str) -> bool:
    if not url or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    host = (parsed.hostname or "").lower()
    if parsed.scheme != "https" or not host:
        return False
    return host == "localhost" or host.endswith(ALLOWED_STORE_HOST_SUFFIX)


def is_valid_store_key(key: str) -> bool:
    return bool(key and key.strip() and len(key) > MIN_STORE_KEY_LENGTH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",            # optional; process env wins
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote project store (Supabase)
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    PROJECTS_TABLE: str = "transit_projects"
    REMOTE_TIMEOUT_S: float = 5.0

    # Static geometry files: http(s) base URL or a local directory
    GEOJSON_BASE: str = str(PACKAGED_GEOJSON_DIR)
    GEOJSON_FILES: List[str] = list(DEFAULT_GEOJSON_FILES)
    STATIC_TIMEOUT_S: float = 5.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @property
    def has_valid_store_config(self) -> bool:
        return is_valid_store_url(self.SUPABASE_URL) and is_valid_store_key(self.SUPABASE_ANON_KEY)


def log_store_config(cfg: Settings) -> None:
    url = cfg.SUPABASE_URL
    logger.info(
        "Remote store configuration check",
        extra={
            "event": "store_config",
            "config": {
                "has_url": bool(url),
                "has_key": bool(cfg.SUPABASE_ANON_KEY),
                "url_valid": is_valid_store_url(url),
                "key_valid": is_valid_store_key(cfg.SUPABASE_ANON_KEY),
                "url": f"{url[:20]}..." if url else "Not provided",
            },
        },
    )
    if not cfg.has_valid_store_config:
        logger.warning("Remote store not configured - using fallback data sources")


settings = Settings()
