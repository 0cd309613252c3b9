"""Small in-process cache for read-mostly snapshots."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

DEFAULT_STALE_SECONDS = 30.0


class TTLCache:
    """Map of key to value where entries count as missing once older than a staleness window."""

    def __init__(
        self,
        *,
        default_stale_seconds: float = DEFAULT_STALE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._default_stale = default_stale_seconds
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, key: str, stale_seconds: Optional[float] = None) -> Any:
        """Return the cached value, or ``None`` when absent or stale."""

        window = self._default_stale if stale_seconds is None else stale_seconds
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            if self._clock() - stored_at > window:
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock())

    def invalidate(self, key_or_prefix: str) -> None:
        """Drop one key, or every key starting with ``key_or_prefix`` when no exact key exists."""

        with self._lock:
            if key_or_prefix in self._entries:
                del self._entries[key_or_prefix]
                return
            for key in [key for key in self._entries if key.startswith(key_or_prefix)]:
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["DEFAULT_STALE_SECONDS", "TTLCache"]
