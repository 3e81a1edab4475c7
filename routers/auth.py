"""
Authentication Router

Provides endpoints for user registration, login, and profile.

Endpoints:
    POST /register - Create new user account
    POST /login - Authenticate and get JWT token
    GET /users/me - Get current user profile
"""

from fastapi import APIRouter, HTTPException, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from core import models, schemas, database
import auth as auth_utils
from utils.logging import get_logger
from utils.rate_limit import limit_auth
from utils.timestamps import now

logger = get_logger(__name__)

router = APIRouter(tags=["Authentication & Users"])


# =============================================================================
# Registration
# =============================================================================

@router.post(
    "/register",
    response_model=schemas.UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    responses={
        201: {"description": "User created successfully"},
        400: {"description": "Email already registered"},
    }
)
@limit_auth
async def register(
    request: Request,  # Required for rate limiter
    user: schemas.UserCreate,
    db: AsyncSession = Depends(database.get_db)
):
    """
    Register a new user account.

    The password is hashed with bcrypt before storage. Point aggregates
    start at zero.

    Raises:
        HTTPException: 400 if email already registered
    """
    result = await db.execute(
        select(models.User).filter(models.User.email == user.email)
    )
    if result.scalars().first():
        logger.warning(f"Registration attempt with existing email: {user.email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    db_user = models.User(
        email=user.email,
        password_hash=auth_utils.get_password_hash(user.password),
        display_name=user.display_name,
        photo_url=user.photo_url,
    )

    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)

    logger.info(f"New user registered: {user.email}")
    return db_user


# =============================================================================
# Login
# =============================================================================

@router.post(
    "/login",
    response_model=schemas.Token,
    summary="Login for access token",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    }
)
@limit_auth
async def login_for_access_token(
    request: Request,  # Required for rate limiter
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(database.get_db)
):
    """
    Authenticate with email (as username) and password.

    Example:
        ```
        POST /login
        Content-Type: application/x-www-form-urlencoded

        username=user@example.com&password=mypassword
        ```
    """
    user = await auth_utils.authenticate_user(db, form_data.username, form_data.password)

    if user is None:
        logger.warning(f"Failed login attempt for: {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user.last_login_at = now()
    await db.commit()

    access_token = auth_utils.create_access_token(data={"sub": user.email})

    logger.info(f"User logged in: {user.email}")
    return {"access_token": access_token, "token_type": "bearer"}


# =============================================================================
# User Profile
# =============================================================================

@router.get(
    "/users/me",
    response_model=schemas.UserResponse,
    summary="Get current user profile",
    responses={
        200: {"description": "User profile retrieved"},
        401: {"description": "Not authenticated"},
    }
)
async def read_users_me(
    current_user: models.User = Depends(auth_utils.get_current_user)
):
    """Current user's profile and point aggregates."""
    logger.debug(f"Profile accessed: {current_user.email}")
    return current_user
