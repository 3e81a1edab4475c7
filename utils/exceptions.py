"""
Custom Exceptions Module

Defines application-specific exceptions for clearer error handling.
All exceptions inherit from a base DexAIError for easy catching; the
FastAPI handler in main.py renders them as JSON with their status code.

Usage:
    from utils.exceptions import WordNotFoundError, QuotaExceededError

    if word is None:
        raise WordNotFoundError(word_id)
"""

from typing import Optional, Dict, Any


class DexAIError(Exception):
    """
    Base exception for all DexAI application errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (optional)
        status_code: HTTP status code to return (optional)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# Input Rejection
# =============================================================================

class InvalidWordFormatError(DexAIError):
    """
    Raised when search text is not shaped like a Romanian word.

    Common causes:
        - Too short or too long
        - Digits or symbols
        - No vowel
    """

    def __init__(
        self,
        message: str = "Format de cuvânt invalid",
        term: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            details={"term": term[:60] if term else None},
            status_code=400
        )


class InputValidationError(DexAIError):
    """Raised when a request field fails validation (vote kind, flag reason, ...)."""

    def __init__(
        self,
        message: str = "Date invalide",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"field": field, **(details or {})},
            status_code=400
        )


# =============================================================================
# Lookup Failures
# =============================================================================

class WordNotFoundError(DexAIError):
    """Raised when an operation targets a word that does not exist."""

    def __init__(self, word_id: str, display: Optional[str] = None):
        super().__init__(
            message=f"Cuvântul \"{display}\" nu există" if display else "Cuvântul nu există",
            details={"word_id": word_id},
            status_code=404
        )


class UserNotFoundError(DexAIError):
    """Raised when a user account is missing."""

    def __init__(self, user_id: Any):
        super().__init__(
            message="Utilizatorul nu există în baza de date.",
            details={"user_id": user_id},
            status_code=404
        )


# =============================================================================
# Policy Rejections
# =============================================================================

class DiscoveryRejectedError(DexAIError):
    """
    Raised when the anti-abuse policy refuses a new discovery.

    Common causes:
        - Word already discovered by this user
        - Too many discoveries in a short window
    """

    def __init__(
        self,
        reason: str,
        word_id: Optional[str] = None
    ):
        super().__init__(
            message=reason,
            details={"word_id": word_id},
            status_code=409
        )


class QuotaExceededError(DexAIError):
    """Raised when a per-identity quota or endpoint rate limit is exhausted."""

    def __init__(
        self,
        message: str = "Prea multe cereri. Te rugăm să încetinești.",
        scope: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"scope": scope, **(details or {})},
            status_code=429
        )


class WordNotVerifiedError(DexAIError):
    """
    Raised when the AI could not confirm the word.

    Covers schema failures, unavailable provider and low confidence alike;
    the precise cause is kept in details.
    """

    def __init__(
        self,
        message: str = "Cuvântul nu pare a fi valid sau nu poate fi verificat automat.",
        cause: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"cause": cause, **(details or {})},
            status_code=422
        )


# =============================================================================
# AI/LLM Exceptions
# =============================================================================

class AIServiceError(DexAIError):
    """
    Raised when AI/LLM service calls fail outright.

    Common causes:
        - Gemini API error
        - Invalid API key
        - Timeout
    """

    def __init__(
        self,
        message: str = "AI service error",
        service: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details={"service": service, **(details or {})},
            status_code=502
        )


# =============================================================================
# Authentication Exceptions
# =============================================================================

class AuthenticationError(DexAIError):
    """
    Raised when authentication is missing or fails.

    Common causes:
        - Invalid credentials
        - Expired token
        - Missing token
    """

    def __init__(
        self,
        message: str = "Authentication required",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details=details,
            status_code=401
        )


class AuthorizationError(DexAIError):
    """
    Raised when an operation is not permitted.

    Common causes:
        - Development-only operation in production
    """

    def __init__(
        self,
        message: str = "Permission denied",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            details=details,
            status_code=403
        )
