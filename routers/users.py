"""
Users Router

Endpoints:
    GET /api/users/{user_id} - Public profile with points and recent contributions
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core import database, schemas
from services.points.leaderboard import get_user_stats

router = APIRouter(prefix="/api/users", tags=["Authentication & Users"])


@router.get(
    "/{user_id}",
    response_model=schemas.ApiResponse,
    responses={404: {"description": "User not found"}},
)
async def user_profile(user_id: int, db: AsyncSession = Depends(database.get_db)):
    """Aggregates, today's remaining discoveries and the latest contributions."""
    return schemas.ApiResponse(data=await get_user_stats(db, user_id))
