# Quota tracking for discovery and endpoint limits

from .rate_limiter import (
    QuotaTracker,
    InMemoryQuotaTracker,
    RedisQuotaTracker,
    get_quota_tracker,
    check_rate_limit,
    check_endpoint_rate_limit,
    get_remaining_requests,
)

__all__ = [
    "QuotaTracker",
    "InMemoryQuotaTracker",
    "RedisQuotaTracker",
    "get_quota_tracker",
    "check_rate_limit",
    "check_endpoint_rate_limit",
    "get_remaining_requests",
]
