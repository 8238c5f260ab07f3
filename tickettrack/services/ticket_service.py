"""
Ticket Service.

Create tickets, watch ticket lists, and change ticket status.

Authorization is not re-checked here: which rows a user may read or
update is enforced by the database's row-level-security policies (see
``tickettrack.schema``).  This layer validates input, stamps
server-owned fields (status, client identity) and words failures for
display.
"""

from __future__ import annotations

from typing import Optional

from tickettrack.contracts import (
    DirectoryStore,
    ErrorCallback,
    SessionStore,
    Subscription,
    TicketsCallback,
    TicketStore,
)
from tickettrack.errors import (
    InvalidStatus,
    NotAuthenticated,
    TicketNotFound,
    TicketTrackError,
    ValidationError,
)
from tickettrack.logger import StructuredLogger
from tickettrack.models.enums import TicketStatus, TicketType
from tickettrack.models.ticket import TITLE_MAX_LENGTH, Ticket, TicketDraft
from tickettrack.models.user import Identity
from tickettrack.services.base_service import BaseService

_VALID_STATUSES: tuple[str, ...] = tuple(s.value for s in TicketStatus)
_VALID_TYPES: tuple[str, ...] = tuple(t.value for t in TicketType)


class TicketService(BaseService):
    """Client access layer for tickets.

    Parameters
    ----------
    session_store:
        Supplies the current identity.
    directory:
        Used to look up the caller's display name.
    tickets:
        Ticket persistence and live queries.
    logger:
        Structured logger.
    """

    def __init__(
        self,
        session_store: SessionStore,
        directory: DirectoryStore,
        tickets: TicketStore,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._session_store = session_store
        self._directory = directory
        self._tickets = tickets

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def submit_ticket(self, title: str, description: str, ticket_type: str) -> str:
        """File a new ticket for the signed-in user and return its id.

        Status is always ``open`` and ``client_id`` is always the caller,
        whatever the arguments.
        """
        identity = self._require_identity("You must be logged in to create a ticket.")

        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description or not ticket_type:
            raise ValidationError("All fields are required.")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must be at most {TITLE_MAX_LENGTH} characters."
            )
        if ticket_type not in _VALID_TYPES:
            raise ValidationError('Type must be either "bug" or "feature".')

        draft = TicketDraft(
            title=title,
            description=description,
            type=TicketType(ticket_type),
            status=TicketStatus.OPEN,
            client_id=identity.id,
            client_name=self._display_name(identity),
            client_email=identity.email,
        )

        try:
            ticket_id = self._tickets.create(draft)
        except Exception as exc:
            raise self._normalize_error(exc, "Failed to create ticket.") from exc

        self._logger.info(
            "Ticket created: %s (%s)",
            ticket_id,
            draft.type,
            extra={
                "event": "TICKET_CREATED",
                "ticket_id": ticket_id,
                "user_id": identity.id,
            },
        )
        return ticket_id

    # ------------------------------------------------------------------
    # Live lists
    # ------------------------------------------------------------------

    def watch_own_tickets(
        self,
        on_data: TicketsCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        """Subscribe to the caller's tickets, newest first.

        Raises ``NotAuthenticated`` (after also passing it to *on_error*)
        when nobody is signed in.
        """
        identity = self._session_store.current_identity()
        if identity is None:
            error = NotAuthenticated("You must be logged in to view tickets.")
            if on_error is not None:
                on_error(error)
            raise error

        client_id = identity.id

        def _own_only(tickets: list[Ticket]) -> None:
            on_data([t for t in tickets if t.client_id == client_id])

        return self._subscribe(client_id, _own_only, on_error)

    def watch_all_tickets(
        self,
        on_data: TicketsCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        """Subscribe to every ticket, newest first.  Admin screens only."""
        return self._subscribe(None, on_data, on_error)

    # ------------------------------------------------------------------
    # Status / lookup
    # ------------------------------------------------------------------

    def set_ticket_status(self, ticket_id: str, status: str) -> None:
        """Change a ticket's status and stamp ``updated_at``."""
        if not ticket_id or not ticket_id.strip():
            raise ValidationError("Ticket ID is required.")
        if status not in _VALID_STATUSES:
            raise InvalidStatus(f"Status must be one of: {', '.join(_VALID_STATUSES)}")

        try:
            updated = self._tickets.update(ticket_id, {"status": str(status)})
        except Exception as exc:
            raise self._normalize_error(exc, "Failed to update ticket status.") from exc

        if not updated:
            raise TicketNotFound()

        self._logger.info(
            "Ticket %s status -> %s",
            ticket_id,
            status,
            extra={"event": "TICKET_STATUS_CHANGED", "ticket_id": ticket_id},
        )

    def get_ticket(self, ticket_id: str) -> Ticket:
        if not ticket_id or not ticket_id.strip():
            raise ValidationError("Ticket ID is required.")
        try:
            ticket = self._tickets.get(ticket_id)
        except Exception as exc:
            raise self._normalize_error(exc, "Failed to get ticket.") from exc
        if ticket is None:
            raise TicketNotFound()
        return ticket

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _require_identity(self, message: str) -> Identity:
        identity = self._session_store.current_identity()
        if identity is None:
            raise NotAuthenticated(message)
        return identity

    def _display_name(self, identity: Identity) -> str:
        """Profile name for *identity*, or its email if the lookup fails."""
        try:
            profile = self._directory.get(identity.id)
        except Exception as exc:
            self._logger.warning(
                "Could not fetch user name, using email instead: %s", exc,
            )
            return identity.email
        return profile.display_name if profile is not None else identity.email

    def _subscribe(
        self,
        client_id: Optional[str],
        on_data: TicketsCallback,
        on_error: Optional[ErrorCallback],
    ) -> Subscription:
        def _route_error(exc: Exception) -> None:
            error = self._normalize_error(exc, "Failed to load tickets.")
            self._logger.error("Error fetching tickets: %s", error.message)
            if on_error is not None:
                on_error(error)

        try:
            return self._tickets.subscribe(client_id, on_data, _route_error)
        except TicketTrackError:
            raise
        except Exception as exc:
            raise self._normalize_error(exc, "Failed to load tickets.") from exc

