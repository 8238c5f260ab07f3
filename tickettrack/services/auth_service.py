"""
Authentication Service.

Sign-up, sign-in, sign-out and role lookup.  Sits between the UI and
the session / directory stores so that ``LoginView`` stays a thin form
handler.

Every method validates its input before any remote call and raises a
``TicketTrackError`` subclass on failure; the UI shows ``exc.message``
as-is.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from tickettrack.contracts import DirectoryStore, SessionStore
from tickettrack.errors import (
    AuthError,
    ErrorCode,
    ProfileCreationError,
    ProfileNotFound,
    RoleMissing,
    SignOutError,
    TicketTrackError,
    ValidationError,
)
from tickettrack.logger import StructuredLogger
from tickettrack.models.auth_models import SUPABASE_ERROR_MAP, ValidationResult
from tickettrack.models.enums import UserRole
from tickettrack.models.user import Identity, UserProfile
from tickettrack.services.base_service import NETWORK_MESSAGE, BaseService

_MIN_PASSWORD_LENGTH: int = 6


class AuthService(BaseService):
    """Centralised authentication service.

    Parameters
    ----------
    session_store:
        Source of truth for the signed-in identity.
    directory:
        Profile rows (name + role).
    logger:
        Structured logger for audit events.
    role_lookup_retries:
        Default retry budget for ``resolve_role``.
    role_lookup_delay_s:
        Fixed delay between ``resolve_role`` attempts.
    sleep:
        Injected for tests.
    """

    def __init__(
        self,
        session_store: SessionStore,
        directory: DirectoryStore,
        logger: StructuredLogger,
        role_lookup_retries: int = 3,
        role_lookup_delay_s: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(logger)
        self._session_store = session_store
        self._directory = directory
        self._role_lookup_retries = role_lookup_retries
        self._role_lookup_delay_s = role_lookup_delay_s
        self._sleep = sleep

    # ==================================================================
    # Validation helpers
    # ==================================================================

    @staticmethod
    def validate_required(*values: Optional[str]) -> ValidationResult:
        """Fail when any value is missing or blank."""
        if all(value and value.strip() for value in values):
            return ValidationResult(is_valid=True)
        return ValidationResult(
            is_valid=False,
            error_message="All fields are required.",
        )

    @staticmethod
    def validate_password(password: str) -> ValidationResult:
        if len(password) < _MIN_PASSWORD_LENGTH:
            return ValidationResult(
                is_valid=False,
                error_message=(
                    f"Password must be at least {_MIN_PASSWORD_LENGTH} characters."
                ),
            )
        return ValidationResult(is_valid=True)

    @staticmethod
    def validate_role(role: str) -> ValidationResult:
        if role in {r.value for r in UserRole}:
            return ValidationResult(is_valid=True)
        return ValidationResult(
            is_valid=False,
            error_message='Role must be either "client" or "admin".',
        )

    @staticmethod
    def normalize_email(email: str) -> str:
        """Strip whitespace and lowercase."""
        return email.strip().lower()

    # ==================================================================
    # Registration
    # ==================================================================

    def register(self, email: str, password: str, name: str, role: str) -> Identity:
        """Create an identity and its profile row.

        The identity is created first.  If the profile cannot be written
        or read back afterwards, ``ProfileCreationError`` is raised and
        the identity is left in place without a profile; the role
        router will then fail to resolve it and sign it out.

        Raises
        ------
        ValidationError
            Missing field, short password, or unknown role.
        AuthError
            The auth service refused the sign-up.
        ProfileCreationError
            The identity exists but its profile could not be confirmed.
        """
        for check in (
            self.validate_required(email, password, name, role),
            self.validate_password(password),
            self.validate_role(role),
        ):
            if not check.is_valid:
                raise ValidationError(check.error_message)

        email = self.normalize_email(email)
        name = name.strip()

        try:
            identity = self._session_store.create_identity(email, password)
        except TicketTrackError:
            raise
        except Exception as exc:
            raise self._classify_auth_error(
                exc, "Failed to create account.", event="REGISTER_FAILED",
            ) from exc

        profile = UserProfile(
            id=identity.id,
            email=identity.email,
            name=name,
            role=UserRole(role),
        )
        try:
            self._directory.put(profile)
            stored = self._directory.get(identity.id)
        except Exception as exc:
            self._logger.error(
                "Profile write failed for %s; identity left without profile: %s",
                identity.id,
                exc,
                extra={"event": "PROFILE_CREATION_FAILED", "user_id": identity.id},
            )
            raise ProfileCreationError() from exc

        if stored is None:
            self._logger.error(
                "Profile for %s not readable after write; identity left "
                "without profile.",
                identity.id,
                extra={"event": "PROFILE_CREATION_FAILED", "user_id": identity.id},
            )
            raise ProfileCreationError()

        self._logger.info(
            "User registered: %s (%s) as %s.",
            name,
            email,
            role,
            extra={"event": "REGISTER", "email": email, "user_id": identity.id},
        )
        return identity

    # ==================================================================
    # Sign-in / sign-out
    # ==================================================================

    def authenticate(self, email: str, password: str) -> Identity:
        """Sign in with email and password.

        Raises
        ------
        ValidationError
            Email or password missing.
        InvalidCredentials, UserNotFound, InvalidEmail
            Recognised auth service refusals.
        AuthError
            Any other failure.
        """
        if not self.validate_required(email, password).is_valid:
            raise ValidationError("Email and password are required.")

        email = self.normalize_email(email)
        try:
            identity = self._session_store.authenticate_identity(email, password)
        except TicketTrackError:
            raise
        except Exception as exc:
            raise self._classify_auth_error(
                exc, "Failed to sign in.", event="LOGIN_FAILED",
            ) from exc

        self._logger.info(
            "User authenticated: %s",
            email,
            extra={"event": "LOGIN", "email": email, "user_id": identity.id},
        )
        return identity

    def end_session(self) -> None:
        """Sign out.  Raises ``SignOutError`` on any failure."""
        identity = self._session_store.current_identity()
        try:
            self._session_store.end_session()
        except Exception as exc:
            self._logger.warning(
                "Sign-out failed: %s", exc, extra={"event": "LOGOUT_FAILED"},
            )
            raise SignOutError() from exc

        self._logger.info(
            "User logged out: %s",
            identity.email if identity else "unknown",
            extra={"event": "LOGOUT"},
        )

    def current_identity(self) -> Optional[Identity]:
        """The cached identity, without a remote call."""
        return self._session_store.current_identity()

    # ==================================================================
    # Role lookup
    # ==================================================================

    def resolve_role(self, identity_id: str, retries: Optional[int] = None) -> UserRole:
        """Read the role from the identity's profile.

        A profile written moments ago may not be visible yet, so a
        missing row is retried ``retries`` times with a fixed delay.

        Raises
        ------
        ProfileNotFound
            Still no row after the last retry.
        RoleMissing
            The row exists but carries no recognised role.
        """
        if not identity_id:
            raise ValidationError("User ID is required.")

        budget = self._role_lookup_retries if retries is None else max(retries, 0)
        for attempt in range(budget + 1):
            try:
                profile = self._directory.get(identity_id)
            except Exception as exc:
                raise self._normalize_error(exc, "Failed to get user role.") from exc

            if profile is not None:
                if profile.role is None:
                    raise RoleMissing()
                return profile.role

            if attempt < budget:
                self._logger.info(
                    "Profile %s not found, retrying (%d attempts left).",
                    identity_id,
                    budget - attempt,
                )
                self._sleep(self._role_lookup_delay_s)

        raise ProfileNotFound()

    # ==================================================================
    # Error classification
    # ==================================================================

    def _classify_auth_error(
        self,
        exc: Exception,
        fallback_message: str,
        event: str,
    ) -> AuthError:
        """Map an auth-service exception onto the ``AuthError`` family.

        The GoTrue error ``code`` is matched first; when absent, each map
        key is searched for in the lower-cased message.
        """
        if isinstance(exc, (ConnectionError, TimeoutError, RuntimeError)):
            self._logger.warning(
                "Network error during auth: %s", exc, extra={"event": event},
            )
            return AuthError(NETWORK_MESSAGE, ErrorCode.NETWORK_ERROR)

        code = str(getattr(exc, "code", None) or "").lower()
        entry = SUPABASE_ERROR_MAP.get(code)
        if entry is None:
            error_str = str(exc).lower()
            for key, candidate in SUPABASE_ERROR_MAP.items():
                if key in error_str:
                    code, entry = key, candidate
                    break

        if entry is not None:
            error_cls, error_code, message = entry
            self._logger.warning(
                "Auth error (%s): %s", code, exc,
                extra={"event": event, "error_code": code},
            )
            return error_cls(message, error_code)

        self._logger.warning(
            "Unknown auth error: %s", exc,
            extra={"event": event, "error_code": "unknown"},
        )
        return AuthError(str(exc) or fallback_message)
