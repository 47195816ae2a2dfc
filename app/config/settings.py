"""Environment driven settings for the analytics API."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[2]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _env_path(name: str, default: str) -> Path:
    path = Path(os.getenv(name) or default)
    if not path.is_absolute():
        path = ROOT_DIR / path
    return path


def _env_origins(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "*")
    origins = tuple(entry.strip() for entry in raw.split(",") if entry.strip())
    return origins or ("*",)


DATA_DIR = _env_path("DATA_DIR", "data")
RESTAURANTS_FILE = os.getenv("RESTAURANTS_FILE", "restaurants.json")
ORDERS_FILE = os.getenv("ORDERS_FILE", "orders.json")

RESPONSE_CACHE_BACKEND = (os.getenv("RESPONSE_CACHE_BACKEND") or "memory").strip().lower()
RESPONSE_CACHE_DIR = _env_path("RESPONSE_CACHE_DIR", "cache")
RESPONSE_CACHE_TTL_SECONDS = _env_int("RESPONSE_CACHE_TTL_SECONDS", 300)
RESPONSE_CACHE_MAX_ENTRIES = _env_int("RESPONSE_CACHE_MAX_ENTRIES", 1000)

TRENDS_WINDOW_DAYS = _env_int("TRENDS_WINDOW_DAYS", 30)
TOP_RESTAURANTS_LIMIT = _env_int("TOP_RESTAURANTS_LIMIT", 3)
PEAK_HOURS_LIMIT = _env_int("PEAK_HOURS_LIMIT", 3)

DEFAULT_PER_PAGE = _env_int("DEFAULT_PER_PAGE", 10)
MAX_PER_PAGE = _env_int("MAX_PER_PAGE", 100)

CORS_ORIGINS = _env_origins("CORS_ORIGINS")
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install a root handler once; uvicorn keeps its own loggers."""

    resolved = logging.getLevelName(level)
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = [
    "CORS_ORIGINS",
    "DATA_DIR",
    "DEFAULT_PER_PAGE",
    "LOG_LEVEL",
    "MAX_PER_PAGE",
    "ORDERS_FILE",
    "PEAK_HOURS_LIMIT",
    "RESPONSE_CACHE_BACKEND",
    "RESPONSE_CACHE_DIR",
    "RESPONSE_CACHE_MAX_ENTRIES",
    "RESPONSE_CACHE_TTL_SECONDS",
    "RESTAURANTS_FILE",
    "TOP_RESTAURANTS_LIMIT",
    "TRENDS_WINDOW_DAYS",
    "configure_logging",
]
