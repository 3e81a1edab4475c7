from pydantic import BaseModel, EmailStr, ConfigDict, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


# =============================================================================
# Users & Auth
# =============================================================================

class UserBase(BaseModel):
    email: EmailStr
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    total_points: float
    daily_points: float
    words_discovered: int
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    email: Optional[str] = None


# =============================================================================
# Dictionary Requests
# =============================================================================

class SearchRequest(BaseModel):
    # Type is checked by the search service so it can answer with a reason
    term: Any = None


class VoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vote_type: Any = Field(None, alias="voteType")


class FlagRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    word_id: Any = Field(None, alias="wordId")
    reason: Any = None


class ContributionRequest(BaseModel):
    type: Any = None
    content: Any = None


# =============================================================================
# Responses
# =============================================================================

class ApiResponse(BaseModel):
    """Envelope shared by all dictionary endpoints."""
    success: bool = True
    data: Optional[Any] = None
    message: Optional[str] = None


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uid: int
    display_name: str = Field(serialization_alias="displayName")
    photo_url: Optional[str] = Field(None, serialization_alias="photoURL")
    total_points: float = Field(serialization_alias="totalPoints")
    words_discovered: int = Field(serialization_alias="wordsDiscovered")
    rank: int


class HealthResponse(BaseModel):
    status: str
    components: Dict[str, bool] = {}
    version: str
    environment: Optional[str] = None
    quota_backend: Optional[str] = None
    notes: List[str] = []
