"""All Tickets View.

Admin screen: the live list of every ticket, swapping to
``TicketDetailView`` when a card is selected and back again afterwards.
The list keeps its subscription while the detail view is open.
"""

from __future__ import annotations

from typing import Optional

import customtkinter as ctk

from tickettrack.logger import StructuredLogger
from tickettrack.models.ticket import Ticket
from tickettrack.services.ticket_service import TicketService
from tickettrack.ui.theme import CONTENT_BG
from tickettrack.ui.views.ticket_detail_view import TicketDetailView
from tickettrack.ui.views.ticket_list_view import TicketListView


class AllTicketsView(ctk.CTkFrame):
    """Every ticket, with a detail view for changing status.

    Parameters
    ----------
    parent:
        Content frame from the app shell.
    ticket_service:
        Source of the live list and target of status changes.
    logger:
        Structured logger.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        ticket_service: TicketService,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._ticket_service = ticket_service
        self._logger = logger
        self._detail: Optional[TicketDetailView] = None

        self._list = TicketListView(
            self,
            title="All Tickets",
            watch=ticket_service.watch_all_tickets,
            logger=logger,
            show_client=True,
            on_select=self._open_detail,
        )
        self._list.pack(fill="both", expand=True)

    def _open_detail(self, ticket: Ticket) -> None:
        self._logger.info("Opening ticket %s", ticket.id)
        self._list.pack_forget()
        self._detail = TicketDetailView(
            self,
            ticket=ticket,
            ticket_service=self._ticket_service,
            logger=self._logger,
            on_back=self._close_detail,
        )
        self._detail.pack(fill="both", expand=True)

    def _close_detail(self) -> None:
        if self._detail is not None:
            self._detail.destroy()
            self._detail = None
        self._list.pack(fill="both", expand=True)
