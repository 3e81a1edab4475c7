"""
Utilities Module

Provides shared utilities across the application:
- Logging configuration
- Custom exceptions
- Rate limiting
- Input sanitization
"""

from .logging import get_logger, setup_logging, log_api_call, log_word_action
from .exceptions import (
    DexAIError,
    InvalidWordFormatError,
    InputValidationError,
    WordNotFoundError,
    UserNotFoundError,
    DiscoveryRejectedError,
    QuotaExceededError,
    WordNotVerifiedError,
    AIServiceError,
    AuthenticationError,
    AuthorizationError,
)
from .rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    get_client_ip,
    RATE_LIMITS,
    limit_auth,
    limit_search,
    limit_autocomplete,
)
from .sanitize import (
    sanitize_string,
    sanitize_text,
    sanitize_word,
    escape_html,
    is_valid_email,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "log_api_call",
    "log_word_action",
    # Exceptions
    "DexAIError",
    "InvalidWordFormatError",
    "InputValidationError",
    "WordNotFoundError",
    "UserNotFoundError",
    "DiscoveryRejectedError",
    "QuotaExceededError",
    "WordNotVerifiedError",
    "AIServiceError",
    "AuthenticationError",
    "AuthorizationError",
    # Rate Limiting
    "limiter",
    "rate_limit_exceeded_handler",
    "get_client_ip",
    "RATE_LIMITS",
    "limit_auth",
    "limit_search",
    "limit_autocomplete",
    # Sanitization
    "sanitize_string",
    "sanitize_text",
    "sanitize_word",
    "escape_html",
    "is_valid_email",
]
