from typing import Protocol


class RateLimiter(Protocol):
    def hit(self, key: str, max_requests: int, window_seconds: int) -> int:
        """Record one request for ``key``; returns how many requests remain in the window (-1 when over)."""
        ...
