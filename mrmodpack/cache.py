import logging
import threading
import time
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class ResponseCache:
    """In-memory cache of decoded API responses with a fixed time-to-live.

    Nothing is written to disk; entries live only as long as the process.
    """

    def __init__(self, ttl: float) -> None:
        self.ttl = ttl
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            cached_at, data = entry
            if time.monotonic() - cached_at >= self.ttl:
                del self._entries[key]
                return None
            return data

    def put(self, key: str, data: Any) -> None:
        with self._lock:
            self._entries[key] = (time.monotonic(), data)


class RequestThrottle:
    """Spaces out requests and backs off when the registry's rate limit runs low."""

    def __init__(self, min_request_interval: float = 0.1, threshold: int = 10) -> None:
        self.rate_remaining = 300
        self.rate_reset = 0
        self.last_request_time = 0.0
        self.min_request_interval = min_request_interval
        self.threshold = threshold
        self._lock = threading.Lock()

    def update_rate_limits(self, headers: Mapping[str, str]) -> None:
        with self._lock:
            self.rate_remaining = int(headers.get("X-Ratelimit-Remaining", self.rate_remaining))
            self.rate_reset = int(headers.get("X-Ratelimit-Reset", 0))

    def should_wait(self) -> float:
        if self.rate_remaining < self.threshold:
            return max(0, self.rate_reset)
        time_since_last = time.monotonic() - self.last_request_time
        if time_since_last < self.min_request_interval:
            return self.min_request_interval - time_since_last
        return 0

    def wait(self) -> None:
        with self._lock:
            wait_time = self.should_wait()
            if wait_time > 0:
                logger.debug("Rate limiting: sleeping %.2fs (%d requests left)", wait_time, self.rate_remaining)
                time.sleep(wait_time)
            self.last_request_time = time.monotonic()
