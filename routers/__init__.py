"""
Routers Module

API routers for the DexAI dictionary application.
"""

from .auth import router as auth_router
from .search import router as search_router
from .words import router as words_router
from .flags import router as flags_router
from .leaderboard import router as leaderboard_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "search_router",
    "words_router",
    "flags_router",
    "leaderboard_router",
    "users_router",
]
