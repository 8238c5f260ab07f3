"""My Tickets View.

Client screen listing the signed-in user's own tickets, newest first.
"""

from __future__ import annotations

import customtkinter as ctk

from tickettrack.logger import StructuredLogger
from tickettrack.services.ticket_service import TicketService
from tickettrack.ui.views.ticket_list_view import TicketListView


class MyTicketsView(TicketListView):
    """The client's own tickets, bound to ``watch_own_tickets``.

    Parameters
    ----------
    parent:
        Content frame from the app shell.
    ticket_service:
        Source of the live list.
    logger:
        Structured logger.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        ticket_service: TicketService,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(
            parent,
            title="My Tickets",
            watch=ticket_service.watch_own_tickets,
            logger=logger,
        )
