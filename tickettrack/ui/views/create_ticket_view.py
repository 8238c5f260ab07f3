"""Create Ticket View.

Client form for filing a bug report or feature request.  The title is
capped at ``TITLE_MAX_LENGTH`` characters with a live counter.  On
success an alert is shown and the form resets.
"""

from __future__ import annotations

import threading
import tkinter as tk
from typing import Optional

import customtkinter as ctk

from tickettrack.errors import TicketTrackError
from tickettrack.logger import StructuredLogger
from tickettrack.models.enums import TicketType
from tickettrack.models.ticket import TITLE_MAX_LENGTH
from tickettrack.services.ticket_service import TicketService
from tickettrack.ui.alerts import show_error, show_info
from tickettrack.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    BUTTON_HEIGHT,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BUTTON,
    FONT_HEADING,
    FONT_LABEL,
    FONT_SMALL,
    INPUT_BORDER,
    INPUT_HEIGHT,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_TYPE_LABELS: dict[str, TicketType] = {
    "Bug": TicketType.BUG,
    "Feature": TicketType.FEATURE,
}


class CreateTicketView(ctk.CTkFrame):
    """New-ticket form.

    Parameters
    ----------
    parent:
        Content container.
    ticket_service:
        Files the ticket.
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

        self._title_var: tk.StringVar = tk.StringVar(master=self)
        self._title_var.trace_add("write", self._on_title_changed)

        self._counter_label: Optional[ctk.CTkLabel] = None
        self._type_selector: Optional[ctk.CTkSegmentedButton] = None
        self._description_box: Optional[ctk.CTkTextbox] = None
        self._submit_button: Optional[ctk.CTkButton] = None

        self._build_ui()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        ctk.CTkLabel(
            self, text="New Ticket", font=FONT_HEADING, text_color=TEXT_PRIMARY,
        ).pack(anchor="w", padx=PADDING_LG, pady=(PADDING_LG, PADDING_SM))

        card = ctk.CTkFrame(self, fg_color=CONTENT_CARD_BG, corner_radius=CORNER_RADIUS)
        card.pack(fill="both", expand=True, padx=PADDING_LG, pady=(0, PADDING_LG))
        inner = ctk.CTkFrame(card, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=PADDING_LG, pady=PADDING_LG)

        # Type
        ctk.CTkLabel(inner, text="TYPE", font=FONT_LABEL, text_color=TEXT_SECONDARY).pack(anchor="w")
        self._type_selector = ctk.CTkSegmentedButton(
            inner,
            values=list(_TYPE_LABELS),
            font=FONT_BODY,
            selected_color=ACCENT_PRIMARY,
            selected_hover_color=ACCENT_HOVER,
        )
        self._type_selector.set("Bug")
        self._type_selector.pack(anchor="w", pady=(4, PADDING_MD))

        # Title
        title_row = ctk.CTkFrame(inner, fg_color="transparent")
        title_row.pack(fill="x")
        ctk.CTkLabel(title_row, text="TITLE", font=FONT_LABEL, text_color=TEXT_SECONDARY).pack(side="left")
        self._counter_label = ctk.CTkLabel(
            title_row, text="", font=FONT_SMALL, text_color=TEXT_SECONDARY,
        )
        self._counter_label.pack(side="right")

        ctk.CTkEntry(
            inner,
            textvariable=self._title_var,
            placeholder_text="Short summary",
            height=INPUT_HEIGHT,
            font=FONT_BODY,
            border_color=INPUT_BORDER,
            corner_radius=CORNER_RADIUS,
        ).pack(fill="x", pady=(4, PADDING_MD))

        # Description
        ctk.CTkLabel(inner, text="DESCRIPTION", font=FONT_LABEL, text_color=TEXT_SECONDARY).pack(anchor="w")
        self._description_box = ctk.CTkTextbox(
            inner,
            height=180,
            font=FONT_BODY,
            border_width=1,
            border_color=INPUT_BORDER,
            corner_radius=CORNER_RADIUS,
        )
        self._description_box.pack(fill="both", expand=True, pady=(4, PADDING_MD))

        self._submit_button = ctk.CTkButton(
            inner,
            text="Submit Ticket",
            font=FONT_BUTTON,
            height=BUTTON_HEIGHT,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            corner_radius=CORNER_RADIUS,
            command=self._handle_submit,
        )
        self._submit_button.pack(fill="x")

        self._on_title_changed()

    # ------------------------------------------------------------------
    # Title counter
    # ------------------------------------------------------------------

    def _on_title_changed(self, *_args: object) -> None:
        value = self._title_var.get()
        if len(value) > TITLE_MAX_LENGTH:
            self._title_var.set(value[:TITLE_MAX_LENGTH])
            return
        if self._counter_label is not None:
            self._counter_label.configure(
                text=f"{len(value)}/{TITLE_MAX_LENGTH}",
                text_color=ERROR_TEXT if len(value) == TITLE_MAX_LENGTH else TEXT_SECONDARY,
            )

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def _handle_submit(self) -> None:
        title = self._title_var.get()
        description = self._description_box.get("1.0", "end").strip()
        ticket_type = _TYPE_LABELS[self._type_selector.get()].value

        self._set_loading(True)
        threading.Thread(
            target=self._submit,
            args=(title, description, ticket_type),
            name="ticket-submit",
            daemon=True,
        ).start()

    def _submit(self, title: str, description: str, ticket_type: str) -> None:
        """Worker thread: UI updates go back through ``after(0, ...)``."""
        try:
            self._ticket_service.submit_ticket(title, description, ticket_type)
        except TicketTrackError as exc:
            message = exc.message
            self.after(0, lambda: self._show_failure(message))
            return
        self.after(0, self._show_success)

    def _show_success(self) -> None:
        self._set_loading(False)
        self._reset()
        show_info("Ticket submitted.", parent=self)

    def _show_failure(self, message: str) -> None:
        self._set_loading(False)
        show_error(message, parent=self)

    def _reset(self) -> None:
        self._title_var.set("")
        self._description_box.delete("1.0", "end")
        self._type_selector.set("Bug")

    def _set_loading(self, loading: bool) -> None:
        if self._submit_button is None:
            return
        self._submit_button.configure(
            text="Submitting..." if loading else "Submit Ticket",
            state="disabled" if loading else "normal",
        )
