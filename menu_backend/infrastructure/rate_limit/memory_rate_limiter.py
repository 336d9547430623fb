import time
from collections import defaultdict, deque
from typing import Deque, Dict

from ...application.ports.rate_limiter import RateLimiter


class InMemoryRateLimiter(RateLimiter):
    """Sliding window per key; suitable for a single worker process."""

    def __init__(self) -> None:
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def hit(self, key: str, max_requests: int, window_seconds: int) -> int:
        now = time.time()
        window_start = now - window_seconds
        q = self._hits[key]
        while q and q[0] <= window_start:
            q.popleft()
        if len(q) >= max_requests:
            return -1
        q.append(now)
        return max_requests - len(q)
