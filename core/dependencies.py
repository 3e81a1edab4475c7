"""
FastAPI Dependencies Module

Provides dependency injection for shared services.
Service instances are singletons to reuse connections/resources; tests
replace them through app.dependency_overrides.

Usage:
    from core.dependencies import get_gateway, get_quota

    @router.post("/search")
    async def search(
        gateway: WordAnalysisGateway = Depends(get_gateway),
        quota: QuotaTracker = Depends(get_quota),
    ):
        ...
"""

from utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Service Providers
# =============================================================================

def get_gateway():
    """
    Get the WordAnalysisGateway singleton.

    Returns:
        WordAnalysisGateway: Gemini-backed gateway (unconfigured without GOOGLE_API_KEY)
    """
    from services.ai.word_analysis import get_word_analysis_gateway
    return get_word_analysis_gateway()


def get_quota():
    """
    Get the QuotaTracker singleton.

    Returns:
        QuotaTracker: Redis-backed when REDIS_URL is set, else in-memory
    """
    from services.security.rate_limiter import get_quota_tracker
    return get_quota_tracker()
