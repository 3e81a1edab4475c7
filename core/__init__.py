"""
Core Module

Provides database, models, schemas, and dependencies for the application.
"""

from .database import Base, engine, get_db, check_database_health
from .models import User, Word, WordVote, Contribution, Flag, SearchLog
from .schemas import (
    UserBase,
    UserCreate,
    UserLogin,
    UserResponse,
    Token,
    TokenData,
    ApiResponse,
    HealthResponse,
)
from .dependencies import get_gateway, get_quota

__all__ = [
    # Database
    "Base",
    "engine",
    "get_db",
    "check_database_health",
    # Models
    "User",
    "Word",
    "WordVote",
    "Contribution",
    "Flag",
    "SearchLog",
    # Schemas
    "UserBase",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "Token",
    "TokenData",
    "ApiResponse",
    "HealthResponse",
    # Dependencies
    "get_gateway",
    "get_quota",
]
