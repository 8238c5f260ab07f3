"""
Ticket Card Component.

One row of a ticket list: title, type badge, status, a short
description preview and, on admin lists, the client's name.  Clicking
the card calls ``on_select`` when one is given.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from tickettrack.models.ticket import Ticket
from tickettrack.ui.theme import (
    BADGE_BUG,
    BADGE_CLIENT,
    BADGE_FEATURE,
    CARD_BORDER,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    FONT_BADGE,
    FONT_BODY,
    FONT_SMALL,
    FONT_TITLE,
    PADDING_MD,
    PADDING_SM,
    STATUS_COLOURS,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_PREVIEW_LENGTH: int = 120


def preview(text: str, limit: int = _PREVIEW_LENGTH) -> str:
    """First *limit* characters of *text* on one line, with an ellipsis if cut."""
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[: limit - 1].rstrip() + "…"


def badge(parent: ctk.CTkFrame, text: str, colour: str) -> ctk.CTkLabel:
    return ctk.CTkLabel(
        parent,
        text=f" {text} ",
        font=FONT_BADGE,
        fg_color=colour,
        text_color=TEXT_LIGHT,
        corner_radius=6,
        height=20,
    )


class TicketCard(ctk.CTkFrame):
    """Compact card for one ticket.

    Parameters
    ----------
    parent:
        Scrollable list frame.
    ticket:
        Snapshot to display.
    show_client:
        Add the client-name badge (admin lists).
    on_select:
        Called with the ticket when the card is clicked.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        ticket: Ticket,
        show_client: bool = False,
        on_select: Optional[Callable[[Ticket], None]] = None,
    ) -> None:
        super().__init__(
            parent,
            fg_color=CONTENT_CARD_BG,
            corner_radius=CORNER_RADIUS,
            border_width=1,
            border_color=CARD_BORDER,
            cursor="hand2" if on_select else "",
        )
        self._ticket = ticket
        self._on_select = on_select

        self._build_ui(ticket, show_client)
        if on_select is not None:
            self._bind_click_recursive(self)

    def _build_ui(self, ticket: Ticket, show_client: bool) -> None:
        top = ctk.CTkFrame(self, fg_color="transparent")
        top.pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 4))

        ctk.CTkLabel(
            top,
            text=ticket.title,
            font=FONT_TITLE,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(side="left", fill="x", expand=True)

        badge(
            top,
            ticket.status.value,
            STATUS_COLOURS.get(ticket.status.value, TEXT_SECONDARY),
        ).pack(side="right", padx=(4, 0))
        badge(
            top,
            ticket.type.value.upper(),
            BADGE_BUG if ticket.is_bug else BADGE_FEATURE,
        ).pack(side="right", padx=(4, 0))

        ctk.CTkLabel(
            self,
            text=preview(ticket.description),
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
            anchor="w",
            justify="left",
            wraplength=560,
        ).pack(fill="x", padx=PADDING_MD, pady=(0, 4))

        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_SM))
        if show_client:
            badge(bottom, ticket.client_name, BADGE_CLIENT).pack(side="left")
        if ticket.created_at is not None:
            ctk.CTkLabel(
                bottom,
                text=ticket.created_at.strftime("%Y-%m-%d %H:%M"),
                font=FONT_SMALL,
                text_color=TEXT_SECONDARY,
            ).pack(side="right")

    def _bind_click_recursive(self, widget: ctk.CTkBaseClass) -> None:
        widget.bind("<Button-1>", self._handle_click)
        for child in widget.winfo_children():
            self._bind_click_recursive(child)

    def _handle_click(self, _event: object) -> None:
        if self._on_select is not None:
            self._on_select(self._ticket)
