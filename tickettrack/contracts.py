"""Backend Contracts.

Structural interfaces for the three hosted collaborators the service
layer talks to.  ``auth.SupabaseSessionStore`` and the repositories in
``tickettrack.repositories`` satisfy them against Supabase; the test
suite satisfies them in memory.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

from tickettrack.models.ticket import Ticket, TicketDraft
from tickettrack.models.user import Identity, UserProfile

SessionCallback = Callable[[Optional[Identity]], None]
TicketsCallback = Callable[[list[Ticket]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class Subscription(Protocol):
    """Handle returned by a live query.

    Calling the handle (or ``cancel()``) stops delivery.  Both are
    idempotent.
    """

    def cancel(self) -> None: ...

    def __call__(self) -> None: ...

    @property
    def active(self) -> bool: ...


@runtime_checkable
class SessionStore(Protocol):
    """Process-wide authentication state."""

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe: ...

    def current_identity(self) -> Optional[Identity]: ...

    def create_identity(self, email: str, password: str) -> Identity: ...

    def authenticate_identity(self, email: str, password: str) -> Identity: ...

    def end_session(self) -> None: ...


@runtime_checkable
class DirectoryStore(Protocol):
    """Point reads and writes of ``UserProfile`` rows."""

    def get(self, user_id: str) -> Optional[UserProfile]: ...

    def put(self, profile: UserProfile) -> None: ...


@runtime_checkable
class TicketStore(Protocol):
    """Ticket persistence.  Results are always ordered newest first."""

    def create(self, draft: TicketDraft) -> str: ...

    def get(self, ticket_id: str) -> Optional[Ticket]: ...

    def update(self, ticket_id: str, changes: dict[str, str]) -> bool: ...

    def subscribe(
        self,
        client_id: Optional[str],
        on_data: TicketsCallback,
        on_error: ErrorCallback,
    ) -> Subscription: ...
