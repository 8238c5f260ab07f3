"""
Ticket Repository.

``TicketStore`` over the ``tickets`` table.  Every list read is ordered
by ``created_at`` descending; live subscriptions are ``LiveQuery``
pollers over the same read.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from tickettrack.contracts import ErrorCallback, TicketsCallback
from tickettrack.database import DatabaseManager
from tickettrack.live_query import LiveQuery
from tickettrack.logger import StructuredLogger
from tickettrack.models.ticket import Ticket, TicketDraft
from tickettrack.repositories.base_repository import BaseRepository


class TicketRepository(BaseRepository):
    """Data access for tickets.

    **No ``delete()`` method.**  Tickets are never removed by this
    client; closing a ticket is a status change.

    Parameters
    ----------
    db:
        Holder of the Supabase client.
    logger:
        Structured logger.
    table:
        Table name (``TICKETS_TABLE``).
    poll_interval_s / max_poll_interval_s:
        ``LiveQuery`` timing for subscriptions.
    """

    def __init__(
        self,
        db: DatabaseManager,
        logger: StructuredLogger,
        table: str = "tickets",
        poll_interval_s: float = 2.0,
        max_poll_interval_s: float = 30.0,
    ) -> None:
        super().__init__(db, table, logger)
        self._poll_interval_s = poll_interval_s
        self._max_poll_interval_s = max_poll_interval_s

    def create(self, draft: TicketDraft) -> str:
        """Insert *draft* and return the new ticket id."""
        response = (
            self.supabase.table(self.table_name)
            .insert(draft.to_row())
            .execute()
        )
        rows = self._rows(response)
        if not rows:
            raise ValueError("Ticket insert returned no row.")
        ticket_id = str(rows[0]["id"])
        self._logger.info("Ticket row inserted: %s", ticket_id)
        return ticket_id

    def get(self, ticket_id: str) -> Optional[Ticket]:
        response = (
            self.supabase.table(self.table_name)
            .select("*")
            .eq("id", ticket_id)
            .maybe_single()
            .execute()
        )
        row = self._single_row(response)
        return Ticket.model_validate(row) if row else None

    def update(self, ticket_id: str, changes: dict[str, str]) -> bool:
        """Apply *changes* and stamp ``updated_at``.

        Returns ``False`` when no row matched (missing ticket, or one
        this user may not update).
        """
        payload: dict[str, str] = {
            **changes,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        response = (
            self.supabase.table(self.table_name)
            .update(payload)
            .eq("id", ticket_id)
            .execute()
        )
        return bool(self._rows(response))

    def list_ordered(self, client_id: Optional[str] = None) -> list[Ticket]:
        """All visible tickets, newest first; only *client_id*'s when given."""
        query = self.supabase.table(self.table_name).select("*")
        if client_id is not None:
            query = query.eq("client_id", client_id)
        response = query.order("created_at", desc=True).execute()
        return [Ticket.model_validate(row) for row in self._rows(response)]

    def subscribe(
        self,
        client_id: Optional[str],
        on_data: TicketsCallback,
        on_error: ErrorCallback,
    ) -> LiveQuery[Ticket]:
        """Start a live query over ``list_ordered(client_id)``."""
        label = f"tickets:{client_id}" if client_id else "tickets:all"
        return LiveQuery(
            fetch=lambda: self.list_ordered(client_id),
            on_data=on_data,
            on_error=on_error,
            interval_s=self._poll_interval_s,
            max_interval_s=self._max_poll_interval_s,
            logger=self._logger,
            name=label,
        ).start()
