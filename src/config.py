"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (e.g.
MEDIA_ROOT, POLL_INTERVAL, read limits and logging options).
"""

from __future__ import annotations

import os
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Host backend: "mount" (directories under MEDIA_ROOT) or "memory"
HOST_BACKEND = os.environ.get("HOST_BACKEND", "mount").strip().lower()

# Mount-point host
MEDIA_ROOT = Path(os.environ.get("MEDIA_ROOT", "/media")).expanduser()
REQUIRE_MOUNTPOINT = _env_bool("REQUIRE_MOUNTPOINT", False)
POLL_INTERVAL = _env_float("POLL_INTERVAL", 2.0)

# Reads
MAX_READ_BYTES = _env_int("MAX_READ_BYTES", 10 * 1024 * 1024)
READ_CHUNK_SIZE = _env_int("READ_CHUNK_SIZE", 64 * 1024)
FALLBACK_ENCODING = os.environ.get("FALLBACK_ENCODING", "").strip()

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip()
LOG_JSON = _env_bool("LOG_JSON", True)
