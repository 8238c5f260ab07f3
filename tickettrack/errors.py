"""
Error Taxonomy.

Every failure that leaves the service layer is a ``TicketTrackError``
whose ``message`` is safe to show to the user verbatim.  ``code`` lets
the UI (and tests) branch without string matching.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional


class ErrorCode(StrEnum):
    """Machine-readable category attached to every ``TicketTrackError``."""

    VALIDATION_ERROR = "validation_error"
    INVALID_CREDENTIALS = "invalid_credentials"
    USER_NOT_FOUND = "user_not_found"
    INVALID_EMAIL = "invalid_email"
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    WEAK_PASSWORD = "weak_password"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    AUTH_ERROR = "auth_error"
    PROFILE_CREATION_FAILED = "profile_creation_failed"
    PROFILE_NOT_FOUND = "profile_not_found"
    ROLE_MISSING = "role_missing"
    NOT_AUTHENTICATED = "not_authenticated"
    INVALID_STATUS = "invalid_status"
    TICKET_NOT_FOUND = "ticket_not_found"
    SIGN_OUT_FAILED = "sign_out_failed"
    SERVICE_ERROR = "service_error"


class TicketTrackError(Exception):
    """Base class for every normalised error."""

    default_code: ErrorCode = ErrorCode.SERVICE_ERROR
    default_message: str = "Something went wrong. Please try again."

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[ErrorCode] = None,
    ) -> None:
        self.message: str = message or self.default_message
        self.code: ErrorCode = code or self.default_code
        super().__init__(self.message)


class ValidationError(TicketTrackError):
    """Bad local input, rejected before any remote call."""

    default_code = ErrorCode.VALIDATION_ERROR
    default_message = "All fields are required."


class AuthError(TicketTrackError):
    """Authentication failed for a reason without a dedicated subclass."""

    default_code = ErrorCode.AUTH_ERROR
    default_message = "Failed to sign in."


class InvalidCredentials(AuthError):
    default_code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Incorrect password."


class UserNotFound(AuthError):
    default_code = ErrorCode.USER_NOT_FOUND
    default_message = "No account found with this email."


class InvalidEmail(AuthError):
    default_code = ErrorCode.INVALID_EMAIL
    default_message = "Invalid email address."


class ProfileCreationError(TicketTrackError):
    """The identity exists but its profile row could not be confirmed."""

    default_code = ErrorCode.PROFILE_CREATION_FAILED
    default_message = "Failed to create user profile."


class ProfileNotFound(TicketTrackError):
    default_code = ErrorCode.PROFILE_NOT_FOUND
    default_message = "User profile not found."


class RoleMissing(TicketTrackError):
    default_code = ErrorCode.ROLE_MISSING
    default_message = "User role not found."


class NotAuthenticated(TicketTrackError):
    default_code = ErrorCode.NOT_AUTHENTICATED
    default_message = "You must be logged in to do that."


class InvalidStatus(ValidationError):
    default_code = ErrorCode.INVALID_STATUS
    default_message = "Invalid ticket status."


class TicketNotFound(TicketTrackError):
    default_code = ErrorCode.TICKET_NOT_FOUND
    default_message = "Ticket not found."


class SignOutError(TicketTrackError):
    default_code = ErrorCode.SIGN_OUT_FAILED
    default_message = "Failed to sign out."


class ServiceError(TicketTrackError):
    """Unclassified failure from the backend, re-worded for display."""

    default_code = ErrorCode.SERVICE_ERROR
