"""FastAPI dependencies and the cached JSON response helper shared by routes."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable

from fastapi import Request, Response
from pydantic import BaseModel

from app.config.settings import (
    RESPONSE_CACHE_BACKEND,
    RESPONSE_CACHE_DIR,
    RESPONSE_CACHE_MAX_ENTRIES,
    RESPONSE_CACHE_TTL_SECONDS,
)
from app.services.data_store import DataSource, JsonFileDataSource
from app.services.response_cache import ResponseCache, build_cache_key, create_response_cache

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


def get_data_source() -> DataSource:
    """A fresh loader per request; the files are re-read on every load."""

    return JsonFileDataSource()


@lru_cache(maxsize=1)
def get_response_cache() -> ResponseCache:
    return create_response_cache(
        RESPONSE_CACHE_BACKEND,
        directory=RESPONSE_CACHE_DIR,
        ttl_seconds=RESPONSE_CACHE_TTL_SECONDS,
        max_entries=RESPONSE_CACHE_MAX_ENTRIES,
    )


def cached_json_response(
    request: Request,
    cache: ResponseCache,
    build: Callable[[], BaseModel],
) -> Response:
    """Serve the cached body for this URI, or build, store and serve a new one.

    Errors raised by ``build`` propagate untouched and are never cached.
    """

    key = build_cache_key(request.url.path, request.url.query)
    body = cache.get(key)
    if body is not None:
        logger.debug("Response cache hit", extra={"cache_key": key, "path": request.url.path})
        return Response(content=body, media_type=JSON_MEDIA_TYPE, headers={"X-Cache": "HIT"})

    body = build().model_dump_json().encode("utf-8")
    cache.set(key, body)
    logger.debug("Response cache miss", extra={"cache_key": key, "path": request.url.path})
    return Response(content=body, media_type=JSON_MEDIA_TYPE, headers={"X-Cache": "MISS"})


__all__ = ["cached_json_response", "get_data_source", "get_response_cache"]
