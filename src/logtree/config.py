"""Runtime settings, read from LOGTREE_* environment variables."""

from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    log_level: str = "WARNING"
    max_workers: int = 1
    encoding: str = "utf-8"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < 1:
        logger.warning("Ignoring %s=%r: must be at least 1", name, raw)
        return default
    return value


def _encoding_env(name: str, default: str) -> str:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        codecs.lookup(raw)
    except LookupError:
        logger.warning("Ignoring %s=%r: unknown encoding", name, raw)
        return default
    return raw


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings(
        log_level=os.environ.get("LOGTREE_LOG_LEVEL", "WARNING").upper(),
        max_workers=_int_env("LOGTREE_MAX_WORKERS", 1),
        encoding=_encoding_env("LOGTREE_ENCODING", "utf-8"),
    )
