# src/cryptotrack/shared/rate_limiter.py
"""
Rate Limiter - Per-chat Command Throttling

Sliding-window rate limiting for chat commands. AI commands get a much
tighter budget than plain commands because every one of them costs a call
to the hosted model.

Files that USE this module:
- cryptotrack.adapters.telegram.handlers (checks limits before each command)

Files that this module USES:
- None (pure utility implementation)
"""
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration for rate limiting."""
    max_requests: int
    time_window: int  # in seconds
    block_duration: int = 300  # 5 minutes default


class RateLimiter:
    """Simple in-memory rate limiter."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._blocked: Dict[str, float] = {}

    def _prune(self, identifier: str, config: RateLimitConfig, now: float) -> Deque[float]:
        cutoff = now - config.time_window
        requests = self._requests[identifier]
        while requests and requests[0] < cutoff:
            requests.popleft()
        return requests

    def is_allowed(self, identifier: str, config: RateLimitConfig) -> bool:
        """
        Record a request and tell whether it is allowed.

        Exceeding the window limit blocks the identifier for config.block_duration.

        Args:
            identifier: Bucket key (e.g. "ai:chat:42")
            config: Rate limit configuration

        Returns:
            True if request is allowed, False if rate limited
        """
        now = self._clock()

        blocked_until = self._blocked.get(identifier)
        if blocked_until is not None:
            if now < blocked_until:
                return False
            del self._blocked[identifier]

        requests = self._prune(identifier, config, now)
        if len(requests) >= config.max_requests:
            self._blocked[identifier] = now + config.block_duration
            return False

        requests.append(now)
        return True

    def get_remaining_requests(self, identifier: str, config: RateLimitConfig) -> int:
        requests = self._prune(identifier, config, self._clock())
        return max(0, config.max_requests - len(requests))

    def get_reset_time(self, identifier: str, config: RateLimitConfig) -> Optional[float]:
        """
        Get when the identifier may send again (clock units), or None if not limited.
        """
        if identifier in self._blocked:
            return self._blocked[identifier]

        requests = self._requests.get(identifier)
        if not requests:
            return None
        return requests[0] + config.time_window

    def reset(self, identifier: Optional[str] = None) -> None:
        """Forget history for one identifier, or for everyone when identifier is None."""
        if identifier is None:
            self._requests.clear()
            self._blocked.clear()
            return
        self._requests.pop(identifier, None)
        self._blocked.pop(identifier, None)


# Shared limiter for the chat front-end
rate_limiter = RateLimiter()

RATE_LIMITS = {
    "user_command": RateLimitConfig(max_requests=20, time_window=60),
    "ai_request": RateLimitConfig(max_requests=5, time_window=60, block_duration=120),
}
