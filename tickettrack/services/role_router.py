"""
Role Router.

Maps session state onto one of three UI modes::

    Resolving -> { Unauthenticated, Client, Admin }

Every session change restarts at ``Resolving``.  A signed-in identity
whose role cannot be resolved is signed out, so the app never sits in
an authenticated-but-unroutable state.

Role lookup may sleep between retries, so it runs through
``run_in_background`` (a daemon thread by default).  Results belonging
to a superseded session change are dropped.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from tickettrack.contracts import SessionStore, Unsubscribe
from tickettrack.errors import SignOutError, TicketTrackError
from tickettrack.logger import StructuredLogger
from tickettrack.models.enums import RouteMode
from tickettrack.models.route import RouteState
from tickettrack.models.user import Identity
from tickettrack.services.auth_service import AuthService
from tickettrack.services.base_service import BaseService

RouteListener = Callable[[RouteState], None]
BackgroundRunner = Callable[[Callable[[], None]], None]


def _run_on_daemon_thread(work: Callable[[], None]) -> None:
    threading.Thread(target=work, name="role-resolver", daemon=True).start()


class RoleRouter(BaseService):
    """Session-driven UI mode state machine.

    Parameters
    ----------
    session_store:
        Observed for identity changes.
    auth_service:
        Used for ``resolve_role`` and the forced ``end_session``.
    logger:
        Structured logger.
    run_in_background:
        Executes role resolution off the caller's thread.
    """

    def __init__(
        self,
        session_store: SessionStore,
        auth_service: AuthService,
        logger: StructuredLogger,
        run_in_background: Optional[BackgroundRunner] = None,
    ) -> None:
        super().__init__(logger)
        self._session_store = session_store
        self._auth_service = auth_service
        self._run_in_background: BackgroundRunner = (
            run_in_background or _run_on_daemon_thread
        )

        self._lock: threading.RLock = threading.RLock()
        self._state: RouteState = RouteState.resolving()
        self._generation: int = 0
        self._listeners: list[RouteListener] = []
        self._unsubscribe_session: Optional[Unsubscribe] = None
        # Message for the sign-out a failed role lookup is forcing.
        self._pending_error: Optional[str] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> RouteState:
        with self._lock:
            return self._state

    def add_listener(self, listener: RouteListener) -> Unsubscribe:
        """Call *listener* on every transition.  Returns an unsubscribe function."""
        with self._lock:
            self._listeners.append(listener)

        def _remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _remove

    def start(self) -> None:
        """Begin observing the session and route the current identity."""
        if self._unsubscribe_session is not None:
            return
        self._unsubscribe_session = self._session_store.on_session_change(
            self._on_session_change,
        )
        self._on_session_change(self._session_store.current_identity())

    def stop(self) -> None:
        if self._unsubscribe_session is not None:
            self._unsubscribe_session()
            self._unsubscribe_session = None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _on_session_change(self, identity: Optional[Identity]) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            error, self._pending_error = self._pending_error, None
            signed_out = (
                identity is None
                and self._state.mode is RouteMode.UNAUTHENTICATED
            )

        if signed_out:
            return

        self._transition(RouteState.resolving())

        if identity is None:
            self._transition(RouteState.unauthenticated(error=error))
            return

        self._run_in_background(lambda: self._resolve(identity, generation))

    def _resolve(self, identity: Identity, generation: int) -> None:
        try:
            role = self._auth_service.resolve_role(identity.id)
        except TicketTrackError as exc:
            if self._is_stale(generation):
                return
            self._logger.error(
                "Error fetching user role for %s: %s. Signing out.",
                identity.id,
                exc.message,
                extra={"event": "ROLE_RESOLUTION_FAILED", "user_id": identity.id},
            )
            with self._lock:
                self._pending_error = exc.message
            try:
                self._auth_service.end_session()
            except SignOutError as sign_out_exc:
                self._logger.warning(
                    "Forced sign-out failed: %s", sign_out_exc.message,
                )

            # Unless the session change already routed with the message.
            with self._lock:
                error, self._pending_error = self._pending_error, None
            if error is not None:
                self._transition(RouteState.unauthenticated(error=error))
            return

        if self._is_stale(generation):
            self._logger.debug("Discarding role for superseded session %s.", identity.id)
            return
        self._transition(RouteState.for_role(identity, role))

    def _is_stale(self, generation: int) -> bool:
        with self._lock:
            return generation != self._generation

    def _transition(self, state: RouteState) -> None:
        with self._lock:
            self._state = state
            listeners = list(self._listeners)

        self._logger.info("Route -> %s", state.mode)
        for listener in listeners:
            try:
                listener(state)
            except Exception:
                self._logger.exception("Route listener failed.")
