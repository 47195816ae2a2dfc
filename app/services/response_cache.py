"""TTL-bounded storage for serialized responses keyed by request signature."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import threading
import time
from collections import OrderedDict
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def build_cache_key(path: str, query: str = "") -> str:
    """Stable key for a request URI; parameter order is significant."""

    uri = f"{path}?{query}" if query else path
    return hashlib.md5(uri.encode("utf-8")).hexdigest()


class ResponseCache:
    """Opaque ``bytes`` blobs, written once per key per TTL window."""

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def set(self, key: str, body: bytes) -> None:
        raise NotImplementedError


class DisabledResponseCache(ResponseCache):
    def get(self, key: str) -> Optional[bytes]:
        return None

    def set(self, key: str, body: bytes) -> None:
        return None


class InMemoryResponseCache(ResponseCache):
    """Entries are kept oldest first; expired ones are purged on every write.

    At most ``max_entries`` bodies are held, the oldest evicted first.
    """

    def __init__(self, ttl_seconds: float = 300, *, max_entries: int = 1000, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, Tuple[float, bytes]] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[bytes]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            created_at, body = entry
            if now - created_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return body

    def set(self, key: str, body: bytes) -> None:
        now = self._clock()
        with self._lock:
            self._entries.pop(key, None)
            self._purge_expired(now)
            while self._entries and len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)
            self._entries[key] = (now, body)

    def _purge_expired(self, now: float) -> None:
        # Insertion order is creation order, so expired entries sit at the front.
        while self._entries:
            oldest_key, (created_at, _) = next(iter(self._entries.items()))
            if now - created_at < self.ttl_seconds:
                break
            del self._entries[oldest_key]


class FileResponseCache(ResponseCache):
    """One ``<key>.json`` file per entry; freshness comes from the file mtime."""

    def __init__(self, directory: Path, ttl_seconds: float = 300):
        self.directory = Path(directory)
        self.ttl_seconds = ttl_seconds

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            if time.time() - path.stat().st_mtime >= self.ttl_seconds:
                return None
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, body: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write then rename so concurrent writers never leave a torn file.
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(body)
            os.replace(tmp_name, self._path(key))
        except OSError:
            logger.warning("Could not write cache entry %s", key, exc_info=True)
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass


def create_response_cache(
    backend: str,
    *,
    directory: Path,
    ttl_seconds: float,
    max_entries: int = 1000,
) -> ResponseCache:
    if backend == "file":
        return FileResponseCache(directory, ttl_seconds)
    if backend in {"disabled", "none", "off"}:
        return DisabledResponseCache()
    if backend != "memory":
        logger.warning("Unknown response cache backend %r, falling back to memory", backend)
    return InMemoryResponseCache(ttl_seconds, max_entries=max_entries)


__all__ = [
    "DisabledResponseCache",
    "FileResponseCache",
    "InMemoryResponseCache",
    "ResponseCache",
    "build_cache_key",
    "create_response_cache",
]
