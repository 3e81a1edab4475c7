"""
DexAI - Backend Application

FastAPI application for an AI-assisted Romanian dictionary.
Users search for words; unknown words are analyzed by an AI model,
validated, stored and credited to the discoverer.

Features:
    - Search-or-discover with Gemini word analysis (LangChain)
    - Anti-abuse quotas and discovery validation
    - Points ledger and leaderboards
    - Community votes with consensus verification
    - Flags and user contributions

Run:
    python main.py
    # or
    uvicorn main:app --reload
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
import uvicorn

from config.settings import settings
from core import models, database, schemas
from core.dependencies import get_quota
from services.security.rate_limiter import InMemoryQuotaTracker, RedisQuotaTracker
from utils.logging import setup_logging, get_logger
from utils.exceptions import DexAIError
from utils.rate_limit import limiter, rate_limit_exceeded_handler

# Import Routers
from routers import auth, search, words, flags, leaderboard, users

# Initialize logging
setup_logging()
logger = get_logger(__name__)


def _sweepable_tracker():
    """The in-memory tracker whose windows need periodic eviction, if any."""
    tracker = get_quota()
    if isinstance(tracker, InMemoryQuotaTracker):
        return tracker
    if isinstance(tracker, RedisQuotaTracker):
        return tracker.fallback
    return None


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events:
        - Startup: Initialize database tables, start quota sweeper
        - Shutdown: Stop sweeper, dispose engine
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")
    logger.info(f"Debug mode: {settings.DEBUG}")

    async with database.engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)
        logger.info("Database tables initialized")

    sweeper = None
    tracker = _sweepable_tracker()
    if tracker is not None:
        sweeper = asyncio.create_task(
            tracker.run_sweeper(settings.RATE_LIMIT_SWEEP_INTERVAL_SECONDS)
        )

    yield

    # Shutdown
    logger.info("Shutting down application")
    if sweeper is not None:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
    await database.engine.dispose()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="AI-assisted Romanian dictionary API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Attach rate limiter to app state
app.state.limiter = limiter


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=500)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(DexAIError)
async def dexai_exception_handler(request: Request, exc: DexAIError):
    """
    Handle application exceptions.

    Returns standardized error response with appropriate status code.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.__class__.__name__}: {exc.message}", extra={"details": exc.details, "path": request.url.path})
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


# Rate limit exceeded handler
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth.router)
app.include_router(search.router)
app.include_router(words.router)
app.include_router(flags.router)
app.include_router(leaderboard.router)
app.include_router(users.router)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/", tags=["Health"])
async def root():
    """Basic liveness check."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


@app.get("/health", tags=["Health"], response_model=schemas.HealthResponse)
async def health_check():
    """
    Detailed health check.

    Checks:
        - Database connectivity
        - AI provider configuration
        - Quota backend in use
    """
    db_healthy = await database.check_database_health()
    tracker = get_quota()

    notes = []
    if not settings.GOOGLE_API_KEY:
        notes.append("GOOGLE_API_KEY not configured: new words cannot be discovered")
    if isinstance(tracker, InMemoryQuotaTracker):
        notes.append("Quotas are per instance (in-memory)")

    return schemas.HealthResponse(
        status="healthy" if db_healthy else "degraded",
        components={
            "database": db_healthy,
            "gemini_configured": settings.GOOGLE_API_KEY is not None,
        },
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        quota_backend=tracker.backend_name,
        notes=notes,
    )


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
