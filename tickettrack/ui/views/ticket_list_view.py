"""Ticket List View.

Live list of tickets backed by a ``TicketFeed``.  Used as-is for the
client's "My Tickets" screen and embedded by ``AllTicketsView`` for
admins.  The subscription opens when the view is built and is cancelled
when the view is destroyed.
"""

from __future__ import annotations

import tkinter as tk
from typing import Callable, Optional

import customtkinter as ctk

from tickettrack.logger import StructuredLogger
from tickettrack.models.ticket import Ticket
from tickettrack.ui.components.ticket_card import TicketCard
from tickettrack.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CONTENT_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_HEADING,
    FONT_SMALL,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)
from tickettrack.ui.ticket_feed import TicketFeed, WatchFn

_REFRESH_INDICATOR_MS: int = 600


class TicketListView(ctk.CTkFrame):
    """Header with count and refresh button over a scrollable card list.

    Parameters
    ----------
    parent:
        Content container.
    title:
        Heading text.
    watch:
        Subscription factory passed to the ``TicketFeed``.
    logger:
        Structured logger.
    show_client:
        Show each ticket's client name (admin lists).
    on_select:
        Called with a ticket when its card is clicked.
    """

    def __init__(
        self,
        parent: ctk.CTkFrame,
        title: str,
        watch: WatchFn,
        logger: StructuredLogger,
        show_client: bool = False,
        on_select: Optional[Callable[[Ticket], None]] = None,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._logger = logger
        self._show_client = show_client
        self._on_select = on_select
        self._closed: bool = False
        self._refresh_job: Optional[str] = None

        self._feed = TicketFeed(watch=watch, logger=logger, on_change=self._on_feed_change)

        self._build_ui(title)
        self._feed.start()

    @property
    def feed(self) -> TicketFeed:
        return self._feed

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_ui(self, title: str) -> None:
        header = ctk.CTkFrame(self, fg_color="transparent")
        header.pack(fill="x", padx=PADDING_LG, pady=(PADDING_LG, PADDING_SM))

        ctk.CTkLabel(
            header, text=title, font=FONT_HEADING, text_color=TEXT_PRIMARY,
        ).pack(side="left")

        self._count_label = ctk.CTkLabel(
            header, text="", font=FONT_SMALL, text_color=TEXT_SECONDARY,
        )
        self._count_label.pack(side="left", padx=(PADDING_MD, 0))

        self._refresh_btn = ctk.CTkButton(
            header,
            text="↻  Refresh",
            font=FONT_BODY,
            fg_color="transparent",
            hover_color=CONTENT_BG,
            text_color=ACCENT_PRIMARY,
            border_width=1,
            border_color=ACCENT_PRIMARY,
            width=110,
            corner_radius=CORNER_RADIUS,
            command=self._handle_refresh,
        )
        self._refresh_btn.pack(side="right")

        self._card_list = ctk.CTkScrollableFrame(self, fg_color=CONTENT_BG)
        self._card_list.pack(fill="both", expand=True, padx=PADDING_LG, pady=(0, PADDING_LG))

        self._render()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _on_feed_change(self, _feed: TicketFeed) -> None:
        """Feed callback, possibly on the poll thread."""
        if self._closed:
            return
        try:
            self.after(0, self._render)
        except (RuntimeError, tk.TclError) as exc:
            self._logger.debug("Ticket list gone before render: %s", exc)

    def _render(self) -> None:
        if self._closed or not self.winfo_exists():
            return
        feed = self._feed

        self._count_label.configure(text="" if feed.loading else feed.header_text())
        self._refresh_btn.configure(
            text="↻  Refreshing..." if feed.refreshing else "↻  Refresh",
            state="disabled" if feed.refreshing else "normal",
        )

        for widget in self._card_list.winfo_children():
            widget.destroy()

        if feed.loading:
            self._show_message("Loading tickets...")
        elif feed.error is not None:
            self._show_error(feed.error)
        elif feed.is_empty:
            self._show_message("No tickets yet")
        else:
            for ticket in feed.tickets:
                TicketCard(
                    self._card_list,
                    ticket=ticket,
                    show_client=self._show_client,
                    on_select=self._on_select,
                ).pack(fill="x", pady=(0, PADDING_SM))

    def _show_message(self, text: str) -> None:
        ctk.CTkLabel(
            self._card_list,
            text=text,
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
            justify="center",
        ).pack(pady=PADDING_LG)

    def _show_error(self, message: str) -> None:
        ctk.CTkLabel(
            self._card_list,
            text=message,
            font=FONT_BODY,
            text_color=ERROR_TEXT,
            justify="center",
            wraplength=480,
        ).pack(pady=(PADDING_LG, PADDING_SM))
        ctk.CTkButton(
            self._card_list,
            text="Retry",
            font=FONT_BODY,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            width=110,
            corner_radius=CORNER_RADIUS,
            command=self._feed.retry,
        ).pack()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _handle_refresh(self) -> None:
        self._feed.begin_refresh()
        self._refresh_job = self.after(_REFRESH_INDICATOR_MS, self._finish_refresh)

    def _finish_refresh(self) -> None:
        self._refresh_job = None
        self._feed.end_refresh()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        """Cancel the subscription and any pending timer, then destroy."""
        self._closed = True
        self._feed.close()
        if self._refresh_job is not None:
            self.after_cancel(self._refresh_job)
            self._refresh_job = None
        super().destroy()
