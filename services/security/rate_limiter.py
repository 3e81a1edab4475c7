"""
Quota Tracker Module

Fixed-window counters keyed by arbitrary strings, used for:
- AI generation quota per user (resets at local midnight)
- Anonymous discovery quota per IP (hourly)
- Endpoint limits: votes, flags, contributions

Uses Redis when REDIS_URL is configured (falls back to in-memory).
Counters are not persisted; a restart clears in-memory windows.

Usage:
    tracker = get_quota_tracker()
    if not await check_endpoint_rate_limit(str(user.id), "vote", 20, 60, tracker=tracker):
        raise QuotaExceededError(...)
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from config.settings import settings
from utils.logging import get_logger
from utils.timestamps import next_local_midnight

logger = get_logger(__name__)


@dataclass
class QuotaWindow:
    """A single fixed window. reset_at is epoch seconds."""
    count: int
    reset_at: float


def _resolve_reset(
    now: float,
    window_seconds: Optional[float],
    reset_at: Optional[datetime]
) -> float:
    if reset_at is not None:
        return reset_at.timestamp()
    if window_seconds is not None:
        return now + window_seconds
    raise ValueError("Either window_seconds or reset_at is required")


class QuotaTracker(ABC):
    """Counter store answering "may this key act once more?"."""

    backend_name = "abstract"

    @abstractmethod
    async def try_consume(
        self,
        key: str,
        ceiling: int,
        window_seconds: Optional[float] = None,
        reset_at: Optional[datetime] = None
    ) -> bool:
        """
        Record one unit against key unless the ceiling is reached.

        Args:
            key: Counter key
            ceiling: Maximum units per window
            window_seconds: Window length, starting at first touch
            reset_at: Absolute window end (wins over window_seconds)

        Returns:
            bool: True if the unit was recorded
        """

    @abstractmethod
    async def remaining(self, key: str, ceiling: int) -> int:
        """Units left in the current window, without consuming."""


class InMemoryQuotaTracker(QuotaTracker):
    """
    Process-local tracker for development/single-instance.

    Expired windows are replaced lazily on the next touch; sweep() evicts
    the ones nobody touches again. Not suitable for multi-instance
    deployments.
    """

    backend_name = "memory"

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._windows: Dict[str, QuotaWindow] = {}

    # No awaits between read and write, so the event loop serializes access
    async def try_consume(
        self,
        key: str,
        ceiling: int,
        window_seconds: Optional[float] = None,
        reset_at: Optional[datetime] = None
    ) -> bool:
        if ceiling <= 0:
            return False

        now = self._clock()
        window = self._windows.get(key)

        if window is None or now >= window.reset_at:
            self._windows[key] = QuotaWindow(
                count=1,
                reset_at=_resolve_reset(now, window_seconds, reset_at)
            )
            return True

        if window.count >= ceiling:
            return False

        window.count += 1
        return True

    async def remaining(self, key: str, ceiling: int) -> int:
        window = self._windows.get(key)
        if window is None or self._clock() >= window.reset_at:
            return ceiling
        return max(0, ceiling - window.count)

    def sweep(self) -> int:
        """Drop expired windows. Returns the number removed."""
        now = self._clock()
        expired = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in expired:
            del self._windows[key]
        return len(expired)

    async def run_sweeper(self, interval_seconds: float) -> None:
        """Periodic sweep loop; run as a background task and cancel on shutdown."""
        logger.info(f"Quota sweeper started (every {interval_seconds}s)")
        while True:
            await asyncio.sleep(interval_seconds)
            removed = self.sweep()
            if removed:
                logger.debug(f"Quota sweeper removed {removed} expired windows")

    def __len__(self) -> int:
        return len(self._windows)


class RedisQuotaTracker(QuotaTracker):
    """
    Redis-based tracker for production/multi-instance.

    INCR on the key, PEXPIREAT on first touch. Falls back to in-memory if
    Redis is unavailable.
    """

    backend_name = "redis"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        prefix: str = "dexai:quota:",
        fallback: Optional[InMemoryQuotaTracker] = None
    ):
        self._redis_url = redis_url or settings.REDIS_URL
        self._prefix = prefix
        self._redis = None
        self._fallback = fallback or InMemoryQuotaTracker()

    @property
    def fallback(self) -> InMemoryQuotaTracker:
        return self._fallback

    async def _get_redis(self):
        """Lazy initialize Redis connection."""
        if self._redis is None and self._redis_url:
            try:
                import redis.asyncio as redis
                self._redis = redis.from_url(self._redis_url)
                await self._redis.ping()
                logger.info("Quota tracker using Redis")
            except Exception as e:
                logger.warning(f"Redis unavailable, using in-memory quotas: {e}")
                self._redis = False  # Mark as unavailable
        return self._redis if self._redis else None

    async def try_consume(
        self,
        key: str,
        ceiling: int,
        window_seconds: Optional[float] = None,
        reset_at: Optional[datetime] = None
    ) -> bool:
        redis = await self._get_redis()

        if not redis:
            return await self._fallback.try_consume(key, ceiling, window_seconds, reset_at)

        if ceiling <= 0:
            return False

        full_key = f"{self._prefix}{key}"
        try:
            pipe = redis.pipeline()
            pipe.incr(full_key)
            pipe.pttl(full_key)
            count, ttl = await pipe.execute()

            # -1: key has no expiry yet, i.e. this call created it
            if ttl == -1:
                reset_ts = _resolve_reset(time.time(), window_seconds, reset_at)
                await redis.pexpireat(full_key, int(reset_ts * 1000))

            if count > ceiling:
                await redis.decr(full_key)
                return False
            return True

        except Exception as e:
            logger.warning(f"Redis error, falling back: {e}")
            return await self._fallback.try_consume(key, ceiling, window_seconds, reset_at)

    async def remaining(self, key: str, ceiling: int) -> int:
        redis = await self._get_redis()
        if not redis:
            return await self._fallback.remaining(key, ceiling)

        try:
            value = await redis.get(f"{self._prefix}{key}")
        except Exception as e:
            logger.debug(f"Redis get failed: {e}")
            return await self._fallback.remaining(key, ceiling)
        return max(0, ceiling - int(value or 0))

    async def close(self) -> None:
        if self._redis:
            await self._redis.close()


# --- Singleton ---
_tracker_instance: Optional[QuotaTracker] = None


def get_quota_tracker() -> QuotaTracker:
    """Get singleton tracker (Redis when configured, else in-memory)."""
    global _tracker_instance
    if _tracker_instance is None:
        if settings.REDIS_URL:
            _tracker_instance = RedisQuotaTracker(settings.REDIS_URL)
        else:
            _tracker_instance = InMemoryQuotaTracker()
    return _tracker_instance


# =============================================================================
# Helpers
# =============================================================================

def _ai_key(identity: str) -> str:
    return f"ai_daily:{identity}"


async def check_rate_limit(
    identity: str,
    max_per_window: Optional[int] = None,
    tracker: Optional[QuotaTracker] = None
) -> bool:
    """
    Consume one AI generation for identity. The window ends at the next
    local midnight.
    """
    tracker = tracker if tracker is not None else get_quota_tracker()
    ceiling = max_per_window if max_per_window is not None else settings.AI_DAILY_LIMIT
    return await tracker.try_consume(_ai_key(identity), ceiling, reset_at=next_local_midnight())


async def check_endpoint_rate_limit(
    identity: str,
    endpoint: str,
    max_per_window: int,
    window_seconds: float,
    tracker: Optional[QuotaTracker] = None
) -> bool:
    """Consume one call of endpoint for identity."""
    tracker = tracker if tracker is not None else get_quota_tracker()
    return await tracker.try_consume(f"{endpoint}:{identity}", max_per_window, window_seconds=window_seconds)


async def get_remaining_requests(
    identity: str,
    max_per_window: Optional[int] = None,
    tracker: Optional[QuotaTracker] = None
) -> int:
    """AI generations left today for identity."""
    tracker = tracker if tracker is not None else get_quota_tracker()
    ceiling = max_per_window if max_per_window is not None else settings.AI_DAILY_LIMIT
    return await tracker.remaining(_ai_key(identity), ceiling)
