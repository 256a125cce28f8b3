from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from .errors import DataDirNotFoundError

DEFAULT_APP_ID = "trip-planner"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:1420",
    "http://127.0.0.1:1420",
    "tauri://localhost",
]

LOG_LEVEL = (os.getenv("TRIPSTORE_LOG_LEVEL") or "INFO").strip().upper()


def load_cors_origins() -> list[str]:
    raw = os.getenv("TRIPSTORE_CORS_ORIGINS")
    if raw:
        origins = [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]
        if origins:
            return origins
    return DEFAULT_CORS_ORIGINS.copy()


def _platform_data_root() -> Path | None:
    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        return Path(appdata) if appdata else None

    try:
        home = Path.home()
    except RuntimeError:
        return None

    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    xdg = (os.getenv("XDG_DATA_HOME") or "").strip()
    if xdg:
        return Path(xdg)
    return home / ".local" / "share"


def resolve_data_dir() -> Path:
    """Return the per-user application data directory.

    ``TRIPSTORE_DATA_DIR`` wins when set; otherwise the directory is derived from
    the platform's conventional data root and the application id.
    """
    override = (os.getenv("TRIPSTORE_DATA_DIR") or "").strip()
    if override:
        return Path(override).expanduser()

    app_id = (os.getenv("TRIPSTORE_APP_ID") or DEFAULT_APP_ID).strip()
    root = _platform_data_root()
    if root is None or not app_id:
        raise DataDirNotFoundError()
    return root / app_id


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
