"""
Authentication & Session State.

``SessionManager`` is the process-wide session context: it holds the
signed-in ``Identity`` and notifies listeners whenever that changes.
It is created once by the composition root and injected everywhere it
is needed; nothing reads it as ambient global state.

``SupabaseSessionStore`` drives the session from Supabase auth and is
the ``SessionStore`` the service layer uses.

Usage::

    session = SessionManager()
    unsubscribe = session.add_listener(lambda identity: print(identity))
    session.set_identity(Identity(id="abc-123", email="a@example.com"))
    session.clear()
"""

from __future__ import annotations

import threading
from typing import Optional

from tickettrack.contracts import SessionCallback, Unsubscribe
from tickettrack.database import DatabaseManager
from tickettrack.logger import StructuredLogger
from tickettrack.models.user import Identity


class SessionManager:
    """Injectable holder for the current identity.

    Lifecycle: empty at app start; ``set_identity`` on sign-up / sign-in;
    ``clear`` on sign-out.  Listeners are called outside the lock, on
    whichever thread made the change, and only when the identity
    actually changed.
    """

    def __init__(self, logger: Optional[StructuredLogger] = None) -> None:
        self._lock: threading.RLock = threading.RLock()
        self._identity: Optional[Identity] = None
        self._listeners: list[SessionCallback] = []
        self._logger: Optional[StructuredLogger] = logger

    def current_identity(self) -> Optional[Identity]:
        """Return the signed-in identity, or ``None``."""
        with self._lock:
            return self._identity

    @property
    def is_authenticated(self) -> bool:
        with self._lock:
            return self._identity is not None

    def set_identity(self, identity: Identity) -> None:
        """Record *identity* as the session principal."""
        with self._lock:
            if self._identity == identity:
                return
            self._identity = identity
        self._notify(identity)

    def clear(self) -> None:
        """End the session locally."""
        with self._lock:
            if self._identity is None:
                return
            self._identity = None
        self._notify(None)

    def add_listener(self, callback: SessionCallback) -> Unsubscribe:
        """Register *callback*; returns an idempotent unsubscribe function."""
        with self._lock:
            self._listeners.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return _unsubscribe

    def _notify(self, identity: Optional[Identity]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(identity)
            except Exception:
                if self._logger is not None:
                    self._logger.exception("Session listener failed.")
                else:
                    raise


class SupabaseSessionStore:
    """``SessionStore`` backed by Supabase auth (GoTrue).

    Raw SDK exceptions propagate; ``AuthService`` classifies them.

    Sign-up only yields a live session when the project has email
    confirmation disabled.  Otherwise the identity is returned without
    being signed in and the profile insert that follows is rejected by
    row-level security.

    Parameters
    ----------
    db:
        Holder of the Supabase client.
    session:
        The process-wide session context to keep in step.
    logger:
        Structured logger.
    """

    def __init__(
        self,
        db: DatabaseManager,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        self._db = db
        self._session = session
        self._logger = logger
        self._auth_subscription = None

        # Mirror server-side sign-outs (e.g. refresh token revoked).
        if db.is_online:
            self._auth_subscription = db.supabase.auth.on_auth_state_change(
                self._on_auth_event,
            )

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        return self._session.add_listener(callback)

    def current_identity(self) -> Optional[Identity]:
        return self._session.current_identity()

    def create_identity(self, email: str, password: str) -> Identity:
        response = self._db.supabase.auth.sign_up({
            "email": email,
            "password": password,
        })
        identity = self._to_identity(response, email)
        if response.session is not None:
            self._session.set_identity(identity)
        else:
            self._logger.warning(
                "Sign-up for %s returned no session; email confirmation "
                "is probably enabled on the project.",
                email,
            )
        return identity

    def authenticate_identity(self, email: str, password: str) -> Identity:
        response = self._db.supabase.auth.sign_in_with_password({
            "email": email,
            "password": password,
        })
        identity = self._to_identity(response, email)
        self._session.set_identity(identity)
        return identity

    def end_session(self) -> None:
        try:
            self._db.supabase.auth.sign_out()
        finally:
            self._session.clear()

    def close(self) -> None:
        """Detach from Supabase auth events."""
        if self._auth_subscription is not None:
            self._auth_subscription.unsubscribe()
            self._auth_subscription = None

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _on_auth_event(self, event: str, _session: object) -> None:
        if event == "SIGNED_OUT":
            self._session.clear()

    @staticmethod
    def _to_identity(response: object, fallback_email: str) -> Identity:
        user = getattr(response, "user", None)
        if user is None:
            raise ValueError("Authentication response contained no user.")
        return Identity(id=str(user.id), email=user.email or fallback_email)
