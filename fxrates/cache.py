"""Cache contract and the default in-process TTL store."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any, Dict, Optional, Protocol, Tuple


class _Miss:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Any = _Miss()
"""Sentinel returned by ``Cache.get`` when the key is absent or expired."""


class Cache(Protocol):
    """Minimal key-value contract the client relies on."""

    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any, ttl_seconds: int = 0) -> None:
        ...


class MemoryCache:
    """Thread-safe dictionary cache with per-entry expiry.

    A ``ttl_seconds`` of zero keeps the entry until it is evicted, either
    explicitly or because ``maxsize`` was reached (oldest insertion first).
    """

    def __init__(
        self,
        maxsize: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if maxsize is not None and maxsize <= 0:
            raise ValueError("maxsize must be a positive integer")
        self._maxsize = maxsize
        self._clock = clock
        self._lock = threading.Lock()
        self._store: Dict[str, Tuple[Optional[float], Any]] = {}

    def get(self, key: str) -> Any:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return MISS
            expires_at, value = item
            if expires_at is not None and self._clock() >= expires_at:
                del self._store[key]
                return MISS
            return value

    def set(self, key: str, value: Any, ttl_seconds: int = 0) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be zero or positive")
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        with self._lock:
            self._store.pop(key, None)
            if self._maxsize is not None and len(self._store) >= self._maxsize:
                oldest_key = next(iter(self._store))
                del self._store[oldest_key]
            self._store[key] = (expires_at, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not MISS
