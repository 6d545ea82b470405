"""Short-lived guard against double submission of the same creation request.

The cache is process-local. Two API processes, or a resubmission arriving
after the window, are not caught; the database stays the source of truth.
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Hashable


class RecentSubmissions:
    def __init__(self, window_seconds: float = 5.0, clock: Callable[[], float] = time.monotonic):
        self.window_seconds = window_seconds
        self._clock = clock
        self._seen: dict[Hashable, float] = {}
        self._lock = threading.Lock()

    def claim(self, key: Hashable) -> bool:
        """Record ``key`` and return True, or False if it was claimed within the window."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            if key in self._seen:
                return False
            self._seen[key] = now
            return True

    def release(self, key: Hashable) -> None:
        with self._lock:
            self._seen.pop(key, None)

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window_seconds
        stale = [k for k, ts in self._seen.items() if ts <= cutoff]
        for k in stale:
            del self._seen[k]

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
