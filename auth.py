"""
Authentication Utilities Module

Password hashing (bcrypt), JWT access tokens (python-jose) and the FastAPI
dependencies that turn a bearer token into a User row.

Tokens carry the user's email in "sub". Endpoints that accept anonymous
callers (search, vote state) use get_current_user_optional, which treats a
missing or invalid token as anonymous instead of failing.

Usage:
    from auth import get_current_user, get_current_user_optional

    @router.post("/words/{word_id}/vote")
    async def vote(user: User = Depends(get_current_user)):
        ...
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config.settings import settings
from core import database, models
from utils.exceptions import AuthenticationError
from utils.logging import get_logger

logger = get_logger(__name__)

# Token extraction from the Authorization header
oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="login", auto_error=False)


# =============================================================================
# Password Hashing
# =============================================================================

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError as e:
        logger.error(f"Password verification failed: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt (default 12 rounds)."""
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
    return hashed.decode('utf-8')


# =============================================================================
# JWT Token Management
# =============================================================================

def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed JWT.

    Args:
        data: Claims; must include "sub" with the user's email
        expires_delta: Lifetime, ACCESS_TOKEN_EXPIRE_MINUTES by default

    Returns:
        str: Encoded token
    """
    to_encode = data.copy()
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["exp"] = datetime.now(timezone.utc) + lifetime

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decoded claims, or None if the token is invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


# =============================================================================
# User Lookup
# =============================================================================

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[models.User]:
    result = await db.execute(
        select(models.User).filter(models.User.email == email)
    )
    return result.scalars().first()


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[models.User]:
    """Return the user if the credentials match, else None."""
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


async def _resolve_token(token: str, db: AsyncSession) -> models.User:
    payload = decode_access_token(token)
    if payload is None:
        logger.warning("JWT decode failed")
        raise AuthenticationError("Could not validate credentials")

    email = payload.get("sub")
    if email is None:
        logger.warning("Token missing 'sub' claim")
        raise AuthenticationError("Could not validate credentials")

    user = await get_user_by_email(db, email)
    if user is None:
        logger.warning(f"User not found for email: {email}")
        raise AuthenticationError("Could not validate credentials")

    return user


# =============================================================================
# User Authentication Dependencies
# =============================================================================

async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme_optional),
    db: AsyncSession = Depends(database.get_db)
) -> models.User:
    """
    FastAPI dependency for endpoints that require a signed-in user.

    Raises:
        AuthenticationError: 401 if the token is missing, invalid, or the
            user no longer exists
    """
    if not token:
        raise AuthenticationError()
    return await _resolve_token(token, db)


async def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme_optional),
    db: AsyncSession = Depends(database.get_db)
) -> Optional[models.User]:
    """
    Optional version of get_current_user that returns None for anonymous
    or badly authenticated requests.
    """
    if not token:
        return None

    try:
        return await _resolve_token(token, db)
    except AuthenticationError:
        return None
