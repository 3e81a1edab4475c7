"""
Leaderboard Router

Endpoints:
    GET /api/leaderboard - Top users for today, week, month or allTime
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core import database, schemas
from services.points.leaderboard import get_leaderboard

router = APIRouter(prefix="/api", tags=["Leaderboard"])


@router.get(
    "/leaderboard",
    response_model=schemas.ApiResponse,
    responses={400: {"description": "Invalid period"}},
)
async def leaderboard(
    period: str = Query("allTime", description="today, week, month or allTime"),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(database.get_db),
):
    entries = await get_leaderboard(db, period=period, limit=limit)
    return schemas.ApiResponse(
        data=[schemas.LeaderboardEntry(**entry).model_dump(by_alias=True) for entry in entries]
    )
