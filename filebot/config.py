"""Configuration settings for the file search bot."""

import os
from typing import FrozenSet

from common.constants import (
    DEFAULT_DAILY_LIMIT,
    DEFAULT_RESULTS_PER_PAGE,
    DEFAULT_SELECTION_TTL_SECONDS,
    DEFAULT_SELECTION_SWEEP_INTERVAL_SECONDS,
    DEFAULT_QUOTA_TIMEZONE,
    DEFAULT_DELIVERY_BASE_URL,
    DEFAULT_DELIVERY_TIMEOUT_SECONDS,
)
from common.logging_config import get_logger

logger = get_logger(__name__)


def _positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}={raw!r}, using default {default}")
        return default
    if value < 1:
        logger.warning(f"{name} must be >= 1 (got {value}), using default {default}")
        return default
    return value


def parse_admin_ids(raw: str) -> FrozenSet[str]:
    """
    Parse comma-separated admin user ids.

    Args:
        raw: Value such as "123, 456,"

    Returns:
        Frozen set of trimmed, non-empty ids
    """
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


DATABASE_PATH = os.environ.get("FILEBOT_DATABASE_PATH", "/app/data/filebot.db")

FILEBOT_HOST = os.environ.get("FILEBOT_HOST", "0.0.0.0")

FILEBOT_PORT = int(os.environ.get("FILEBOT_PORT", "8000"))

ADMIN_IDS = parse_admin_ids(os.environ.get("ADMIN_IDS", ""))

DAILY_LIMIT = _positive_int("DAILY_LIMIT", DEFAULT_DAILY_LIMIT)

RESULTS_PER_PAGE = _positive_int("RESULTS_PER_PAGE", DEFAULT_RESULTS_PER_PAGE)

SELECTION_TTL_SECONDS = _positive_int("SELECTION_TTL_SECONDS", DEFAULT_SELECTION_TTL_SECONDS)

SELECTION_SWEEP_INTERVAL_SECONDS = _positive_int(
    "SELECTION_SWEEP_INTERVAL_SECONDS", DEFAULT_SELECTION_SWEEP_INTERVAL_SECONDS
)

QUOTA_TIMEZONE = os.environ.get("QUOTA_TIMEZONE", DEFAULT_QUOTA_TIMEZONE)

TELEGRAM_TOKEN = os.environ.get("TELEGRAM_TOKEN", "")

DELIVERY_BASE_URL = os.environ.get("DELIVERY_BASE_URL", DEFAULT_DELIVERY_BASE_URL).rstrip("/")

DELIVERY_TIMEOUT_SECONDS = _positive_int("DELIVERY_TIMEOUT_SECONDS", DEFAULT_DELIVERY_TIMEOUT_SECONDS)

FRONTEND_API_KEY = os.environ.get("FRONTEND_API_KEY", "")
