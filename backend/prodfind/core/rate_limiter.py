"""Per-client burst tracking for mutation endpoints."""

import time
from collections import OrderedDict, deque
from threading import Lock


class BurstLimiter:
    """Counts recent events per client key over a sliding window.

    Keys are dropped as soon as their window empties, and at most
    ``max_keys`` clients are tracked at once; past that the least recently
    seen client is forgotten. Anonymous callers are keyed by IP, so without
    the cap every address that ever posted would stay in memory.
    """

    def __init__(self, max_requests: int, window_seconds: int = 60, max_keys: int = 10_000):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        # Ordered by last activity, least recent first.
        self._events: OrderedDict[str, deque[float]] = OrderedDict()
        self._lock = Lock()

    def is_allowed(self, key: str) -> bool:
        """Record an event for ``key``; False once it is over the burst limit."""
        now = time.monotonic()
        cutoff = now - self.window_seconds

        with self._lock:
            events = self._events.pop(key, None) or deque()
            while events and events[0] <= cutoff:
                events.popleft()

            allowed = len(events) < self.max_requests
            if allowed:
                events.append(now)
            if events:
                self._events[key] = events

            self._evict(cutoff)
            return allowed

    def _evict(self, cutoff: float) -> None:
        while self._events:
            key, events = next(iter(self._events.items()))
            if events[-1] > cutoff and len(self._events) <= self.max_keys:
                break
            del self._events[key]

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._events)

    def reset(self) -> None:
        with self._lock:
            self._events.clear()
