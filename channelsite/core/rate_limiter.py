"""
Rate Limiter - Control request frequency per user.

Chat and generation requests each cost at least one LLM call, so they
are throttled per user to keep provider spend predictable.

This is an in-memory limiter; each API instance counts independently.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
import threading

from channelsite.core.exceptions import RateLimitExceeded
from channelsite.core.logging_config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Simple sliding window rate limiter.

    Tracks requests per identifier (user id) within a one-minute window.

    Example:
        >>> limiter = RateLimiter(requests_per_minute=30)
        >>> limiter.is_allowed("user-123")
        (True, 29)
    """

    def __init__(
        self,
        requests_per_minute: int = 30,
        cleanup_interval_minutes: int = 5
    ):
        self.limit = requests_per_minute
        self.window = timedelta(minutes=1)
        self.cleanup_interval = timedelta(minutes=cleanup_interval_minutes)

        self._requests: Dict[str, List[datetime]] = {}
        self._lock = threading.RLock()
        self._last_cleanup = datetime.utcnow()

        logger.info(f"RateLimiter initialized: {requests_per_minute} requests/minute")

    def is_allowed(self, identifier: str) -> Tuple[bool, int]:
        """
        Check if a request is allowed and record it when it is.

        Returns:
            Tuple of (is_allowed, remaining_requests)
        """
        with self._lock:
            self._maybe_cleanup()

            now = datetime.utcnow()
            recent = self._recent(identifier, now)
            self._requests[identifier] = recent

            if len(recent) >= self.limit:
                logger.warning(f"Rate limit exceeded for: {identifier[:8]}...")
                return False, 0

            recent.append(now)
            return True, self.limit - len(recent)

    def check(self, identifier: str) -> int:
        """
        Record a request or raise RateLimitExceeded.

        Returns:
            Remaining requests in the current window
        """
        allowed, remaining = self.is_allowed(identifier)
        if not allowed:
            reset_time = self.get_reset_time(identifier)
            retry_after = max(1, int((reset_time - datetime.utcnow()).total_seconds()))
            raise RateLimitExceeded(retry_after=retry_after)
        return remaining

    def get_remaining(self, identifier: str) -> int:
        """Get remaining requests for an identifier."""
        with self._lock:
            return max(0, self.limit - len(self._recent(identifier, datetime.utcnow())))

    def get_reset_time(self, identifier: str) -> datetime:
        """Get when the oldest counted request leaves the window."""
        with self._lock:
            timestamps = self._requests.get(identifier)
            if not timestamps:
                return datetime.utcnow()
            return min(timestamps) + self.window

    def reset(self, identifier: Optional[str] = None) -> None:
        """Forget recorded requests for one identifier, or for everyone."""
        with self._lock:
            if identifier is None:
                self._requests.clear()
            else:
                self._requests.pop(identifier, None)

    def _recent(self, identifier: str, now: datetime) -> List[datetime]:
        cutoff = now - self.window
        return [t for t in self._requests.get(identifier, []) if t > cutoff]

    def _maybe_cleanup(self) -> None:
        """Remove old entries periodically."""
        now = datetime.utcnow()

        if now - self._last_cleanup < self.cleanup_interval:
            return

        for identifier in list(self._requests.keys()):
            self._requests[identifier] = self._recent(identifier, now)
            if not self._requests[identifier]:
                del self._requests[identifier]

        self._last_cleanup = now
        logger.debug(f"Rate limiter cleanup: {len(self._requests)} active users")


_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get or create the global rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        from channelsite.core.config import get_settings
        _rate_limiter = RateLimiter(
            requests_per_minute=get_settings().rate_limit_per_minute
        )
    return _rate_limiter


def reset_rate_limiter() -> None:
    """Drop the global rate limiter (used by tests)."""
    global _rate_limiter
    _rate_limiter = None
