"""Per-caller fixed-window rate limiting for the AI proxy endpoints.

State is an in-memory table keyed by client identifier (usually the IP):
  * a window opens on the first request and lasts window_seconds
  * at most max_requests are allowed inside one window
  * a Lock guards the table since FastAPI runs sync endpoints in a threadpool
This is per-process; multiple workers each keep their own counts.
"""
import time
from threading import Lock
from typing import Callable, Dict, Tuple

from mealplan.utilities.config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS


class FixedWindowRateLimiter:
    def __init__(self, max_requests: int = RATE_LIMIT_MAX_REQUESTS,
                 window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = Lock()
        # identifier -> (window start, count)
        self._windows: Dict[str, Tuple[float, int]] = {}

    def allow(self, identifier: str) -> bool:
        """Count a request for identifier; False once the window is full."""
        now = self._clock()
        with self._lock:
            start, count = self._windows.get(identifier, (now, 0))
            if now - start >= self.window_seconds:
                start, count = now, 0
            if count >= self.max_requests:
                self._windows[identifier] = (start, count)
                return False
            self._windows[identifier] = (start, count + 1)
            self._evict_expired(now)
            return True

    def retry_after(self, identifier: str) -> int:
        now = self._clock()
        with self._lock:
            start, _ = self._windows.get(identifier, (now, 0))
        return max(0, int(round(self.window_seconds - (now - start))))

    def _evict_expired(self, now: float):
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def reset(self):
        with self._lock:
            self._windows.clear()
