"""
Authentication Models.

Validation result model and the table that maps Supabase auth error
codes onto the ``AuthError`` family.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from tickettrack.errors import (
    AuthError,
    ErrorCode,
    InvalidCredentials,
    InvalidEmail,
    UserNotFound,
)


# ---------------------------------------------------------------------------
# Supabase error-code mapping
# ---------------------------------------------------------------------------
# Keys are GoTrue error codes (``AuthApiError.code``).  When an error
# carries no code the key is also searched for in the lower-cased message.

SUPABASE_ERROR_MAP: dict[str, tuple[type[AuthError], Optional[ErrorCode], str]] = {
    "user_not_found": (
        UserNotFound, None, "No account found with this email.",
    ),
    "invalid_credentials": (
        InvalidCredentials, None, "Incorrect password.",
    ),
    "invalid_grant": (
        InvalidCredentials, None, "Incorrect password.",
    ),
    "email_address_invalid": (
        InvalidEmail, None, "Invalid email address.",
    ),
    "invalid_email": (
        InvalidEmail, None, "Invalid email address.",
    ),
    "user_already_exists": (
        AuthError,
        ErrorCode.EMAIL_ALREADY_EXISTS,
        "An account with this email already exists. Try signing in.",
    ),
    "email_exists": (
        AuthError,
        ErrorCode.EMAIL_ALREADY_EXISTS,
        "An account with this email already exists. Try signing in.",
    ),
    "weak_password": (
        AuthError, ErrorCode.WEAK_PASSWORD, "Password is too weak.",
    ),
    "over_request_rate_limit": (
        AuthError,
        ErrorCode.RATE_LIMITED,
        "Too many attempts. Please wait a moment and try again.",
    ),
}


class ValidationResult(BaseModel):
    """Outcome of a single client-side field check."""

    is_valid: bool
    error_message: Optional[str] = None
