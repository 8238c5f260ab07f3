"""Ticket Detail View.

Admin view of one ticket snapshot with a button per status.  The
button for the ticket's current status is highlighted.  A status
change runs on a worker thread; on success the view navigates back.
"""

from __future__ import annotations

import threading
from typing import Callable

import customtkinter as ctk

from tickettrack.errors import TicketTrackError
from tickettrack.logger import StructuredLogger
from tickettrack.models.enums import TicketStatus
from tickettrack.models.ticket import Ticket
from tickettrack.services.ticket_service import TicketService
from tickettrack.ui.alerts import show_error, show_info
from tickettrack.ui.components.ticket_card import badge
from tickettrack.ui.theme import (
    ACCENT_PRIMARY,
    BADGE_BUG,
    BADGE_CLIENT,
    BADGE_FEATURE,
    BUTTON_HEIGHT,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    FONT_BODY,
    FONT_BUTTON,
    FONT_HEADING,
    FONT_LABEL,
    FONT_SMALL,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    STATUS_COLOURS,
    STATUS_INACTIVE_BG,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_STATUS_LABELS: dict[TicketStatus, str] = {
    TicketStatus.OPEN: "Open",
    TicketStatus.IN_PROGRESS: "In Progress",
    TicketStatus.RESOLVED: "Resolved",
    TicketStatus.CLOSED: "Closed",
}


class TicketDetailView(ctk.CTkFrame):
    """Full ticket snapshot plus status controls.

    Parameters
    ----------
    parent:
        Container frame.
    ticket:
        Snapshot selected from the list.
    ticket_service:
        Performs the status change.
    logger:
        Structured logger.
    on_back:
        Returns to the list.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        ticket: Ticket,
        ticket_service: TicketService,
        logger: StructuredLogger,
        on_back: Callable[[], None],
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._ticket = ticket
        self._ticket_service = ticket_service
        self._logger = logger
        self._on_back = on_back
        self._status_buttons: dict[TicketStatus, ctk.CTkButton] = {}

        self._build_ui()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        ticket = self._ticket

        ctk.CTkButton(
            self,
            text="←  Back to tickets",
            font=FONT_BODY,
            fg_color="transparent",
            hover_color=CONTENT_BG,
            text_color=ACCENT_PRIMARY,
            anchor="w",
            width=160,
            command=self._on_back,
        ).pack(anchor="w", padx=PADDING_LG, pady=(PADDING_MD, 0))

        card = ctk.CTkFrame(self, fg_color=CONTENT_CARD_BG, corner_radius=CORNER_RADIUS)
        card.pack(fill="both", expand=True, padx=PADDING_LG, pady=PADDING_MD)

        ctk.CTkLabel(
            card,
            text=ticket.title,
            font=FONT_HEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
            justify="left",
            wraplength=640,
        ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, PADDING_SM))

        badges = ctk.CTkFrame(card, fg_color="transparent")
        badges.pack(fill="x", padx=PADDING_MD)
        badge(
            badges, ticket.type.value.upper(), BADGE_BUG if ticket.is_bug else BADGE_FEATURE,
        ).pack(side="left", padx=(0, 4))
        badge(badges, ticket.client_name, BADGE_CLIENT).pack(side="left")

        self._section(card, "Description")
        ctk.CTkLabel(
            card,
            text=ticket.description,
            font=FONT_BODY,
            text_color=TEXT_PRIMARY,
            anchor="w",
            justify="left",
            wraplength=640,
        ).pack(fill="x", padx=PADDING_MD)

        self._section(card, "Client")
        ctk.CTkLabel(
            card,
            text=f"{ticket.client_name} <{ticket.client_email}>",
            font=FONT_BODY,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(fill="x", padx=PADDING_MD)

        dates = []
        if ticket.created_at is not None:
            dates.append(f"Created {ticket.created_at:%Y-%m-%d %H:%M}")
        if ticket.updated_at is not None:
            dates.append(f"Updated {ticket.updated_at:%Y-%m-%d %H:%M}")
        if dates:
            ctk.CTkLabel(
                card,
                text="   ·   ".join(dates),
                font=FONT_SMALL,
                text_color=TEXT_SECONDARY,
                anchor="w",
            ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_SM, 0))

        self._section(card, "Status")
        row = ctk.CTkFrame(card, fg_color="transparent")
        row.pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_MD))
        for status in TicketStatus:
            btn = ctk.CTkButton(
                row,
                text=_STATUS_LABELS[status],
                font=FONT_BUTTON,
                height=BUTTON_HEIGHT,
                corner_radius=CORNER_RADIUS,
                command=lambda s=status: self._handle_status(s),
            )
            btn.pack(side="left", expand=True, fill="x", padx=(0, PADDING_SM))
            self._status_buttons[status] = btn
        self._highlight(ticket.status)

    @staticmethod
    def _section(parent: ctk.CTkFrame, title: str) -> None:
        ctk.CTkLabel(
            parent,
            text=title.upper(),
            font=FONT_LABEL,
            text_color=TEXT_SECONDARY,
            anchor="w",
        ).pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 4))

    def _highlight(self, current: TicketStatus) -> None:
        for status, btn in self._status_buttons.items():
            if status == current:
                colour = STATUS_COLOURS[status.value]
                btn.configure(fg_color=colour, hover_color=colour, text_color=TEXT_LIGHT)
            else:
                btn.configure(
                    fg_color=STATUS_INACTIVE_BG,
                    hover_color=STATUS_COLOURS[status.value],
                    text_color=TEXT_PRIMARY,
                )

    # ------------------------------------------------------------------
    # Status change
    # ------------------------------------------------------------------

    def _set_busy(self, busy: bool) -> None:
        for btn in self._status_buttons.values():
            btn.configure(state="disabled" if busy else "normal")

    def _handle_status(self, status: TicketStatus) -> None:
        self._set_busy(True)
        threading.Thread(
            target=self._update_status,
            args=(status,),
            name="ticket-status",
            daemon=True,
        ).start()

    def _update_status(self, status: TicketStatus) -> None:
        """Worker thread: UI updates go back through ``after(0, ...)``."""
        try:
            self._ticket_service.set_ticket_status(self._ticket.id, status.value)
        except TicketTrackError as exc:
            message = exc.message
            self.after(0, lambda: self._show_failure(message))
            return
        self.after(0, lambda: self._show_success(status))

    def _show_success(self, status: TicketStatus) -> None:
        show_info(f"Ticket marked as {_STATUS_LABELS[status]}.", parent=self)
        self._on_back()

    def _show_failure(self, message: str) -> None:
        self._set_busy(False)
        show_error(message, parent=self)
