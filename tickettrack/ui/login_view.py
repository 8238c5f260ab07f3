"""Login View: Authentication Screen.

Sign In / Sign Up tabs in a centred card.  Inputs are gathered here and
handed to ``AuthService`` on a worker thread.  Navigation after a
successful sign-in is not this view's job: the session change reaches
the ``RoleRouter``, which routes the shell.
"""

from __future__ import annotations

import threading
import tkinter as tk
from typing import Optional

import customtkinter as ctk

from tickettrack.errors import TicketTrackError
from tickettrack.logger import StructuredLogger
from tickettrack.models.enums import UserRole
from tickettrack.services.auth_service import AuthService
from tickettrack.ui.alerts import show_error
from tickettrack.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    BUTTON_HEIGHT,
    CARD_BORDER,
    CONTENT_BG,
    CONTENT_CARD_BG,
    FONT_BODY,
    FONT_BRAND,
    FONT_BUTTON,
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

_CARD_WIDTH: int = 400
_TAB_HEIGHT: int = 40
_ROLE_LABELS: dict[str, UserRole] = {
    "Client": UserRole.CLIENT,
    "Admin": UserRole.ADMIN,
}


class LoginView(ctk.CTkFrame):
    """Full-screen sign-in / sign-up frame.

    Parameters
    ----------
    parent:
        The shell window.
    auth_service:
        Performs sign-in and registration.
    logger:
        Structured logger.
    """

    def __init__(
        self,
        parent: ctk.CTk,
        auth_service: AuthService,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._auth_service = auth_service
        self._logger = logger
        self._active_tab: str = "sign_in"

        self._email_entry: Optional[ctk.CTkEntry] = None
        self._password_entry: Optional[ctk.CTkEntry] = None
        self._sign_in_button: Optional[ctk.CTkButton] = None

        self._su_name_entry: Optional[ctk.CTkEntry] = None
        self._su_email_entry: Optional[ctk.CTkEntry] = None
        self._su_password_entry: Optional[ctk.CTkEntry] = None
        self._su_role_selector: Optional[ctk.CTkSegmentedButton] = None
        self._sign_up_button: Optional[ctk.CTkButton] = None

        self._build_ui()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def show_message(self, message: str) -> None:
        """Alert the user, e.g. after a forced sign-out."""
        show_error(message, parent=self)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)
        self.grid_columnconfigure(0, weight=1)

        card = ctk.CTkFrame(
            self,
            width=_CARD_WIDTH,
            fg_color=CONTENT_CARD_BG,
            corner_radius=16,
            border_width=1,
            border_color=CARD_BORDER,
        )
        card.grid(row=1, column=0)

        inner = ctk.CTkFrame(card, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=36, pady=28)

        ctk.CTkLabel(inner, text="TicketTrack", font=FONT_BRAND, text_color=TEXT_PRIMARY).pack()
        ctk.CTkLabel(
            inner,
            text="Bug reports and feature requests",
            font=FONT_SMALL,
            text_color=TEXT_SECONDARY,
        ).pack(pady=(0, PADDING_LG))

        tab_bar = ctk.CTkFrame(inner, fg_color="transparent", height=_TAB_HEIGHT)
        tab_bar.pack(fill="x", pady=(0, PADDING_MD))
        tab_bar.grid_columnconfigure((0, 1), weight=1)

        self._sign_in_tab = self._tab_button(tab_bar, "Sign In", "sign_in")
        self._sign_in_tab.grid(row=0, column=0, sticky="nsew")
        self._sign_up_tab = self._tab_button(tab_bar, "Sign Up", "sign_up")
        self._sign_up_tab.grid(row=0, column=1, sticky="nsew")

        self._sign_in_frame = ctk.CTkFrame(inner, fg_color="transparent")
        self._build_sign_in_tab(self._sign_in_frame)
        self._sign_up_frame = ctk.CTkFrame(inner, fg_color="transparent")
        self._build_sign_up_tab(self._sign_up_frame)

        self._sign_in_frame.pack(fill="both", expand=True)
        self._style_tabs()

    def _tab_button(self, parent: ctk.CTkFrame, text: str, tab: str) -> ctk.CTkButton:
        return ctk.CTkButton(
            parent,
            text=text,
            fg_color="transparent",
            hover_color=CONTENT_BG,
            height=_TAB_HEIGHT,
            corner_radius=0,
            command=lambda: self._switch_tab(tab),
        )

    @staticmethod
    def _entry(parent: ctk.CTkFrame, label: str, placeholder: str, show: str = "") -> ctk.CTkEntry:
        ctk.CTkLabel(
            parent, text=label, font=FONT_LABEL, text_color=TEXT_SECONDARY, anchor="w",
        ).pack(fill="x", pady=(0, 4))
        entry = ctk.CTkEntry(
            parent,
            placeholder_text=placeholder,
            show=show,
            height=INPUT_HEIGHT,
            font=FONT_BODY,
            border_color=INPUT_BORDER,
        )
        entry.pack(fill="x", pady=(0, PADDING_MD))
        return entry

    @staticmethod
    def _submit_button(parent: ctk.CTkFrame, text: str, command: object) -> ctk.CTkButton:
        btn = ctk.CTkButton(
            parent,
            text=text,
            font=FONT_BUTTON,
            height=BUTTON_HEIGHT,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            command=command,
        )
        btn.pack(fill="x", pady=(PADDING_SM, 0))
        return btn

    def _build_sign_in_tab(self, parent: ctk.CTkFrame) -> None:
        self._email_entry = self._entry(parent, "EMAIL", "you@example.com")
        self._password_entry = self._entry(parent, "PASSWORD", "Password", show="•")
        self._password_entry.bind("<Return>", self._on_enter_key)
        self._sign_in_button = self._submit_button(parent, "Sign In  →", self._handle_sign_in)

    def _build_sign_up_tab(self, parent: ctk.CTkFrame) -> None:
        self._su_name_entry = self._entry(parent, "NAME", "Your name")
        self._su_email_entry = self._entry(parent, "EMAIL", "you@example.com")
        self._su_password_entry = self._entry(parent, "PASSWORD", "At least 6 characters", show="•")

        ctk.CTkLabel(
            parent, text="ROLE", font=FONT_LABEL, text_color=TEXT_SECONDARY, anchor="w",
        ).pack(fill="x", pady=(0, 4))
        self._su_role_selector = ctk.CTkSegmentedButton(
            parent,
            values=list(_ROLE_LABELS),
            font=FONT_BODY,
            selected_color=ACCENT_PRIMARY,
            selected_hover_color=ACCENT_HOVER,
        )
        self._su_role_selector.set("Client")
        self._su_role_selector.pack(fill="x", pady=(0, PADDING_MD))

        self._sign_up_button = self._submit_button(
            parent, "Create Account  →", self._handle_sign_up,
        )

    def _switch_tab(self, tab: str) -> None:
        if tab == self._active_tab:
            return
        self._active_tab = tab
        if tab == "sign_in":
            self._sign_up_frame.pack_forget()
            self._sign_in_frame.pack(fill="both", expand=True)
        else:
            self._sign_in_frame.pack_forget()
            self._sign_up_frame.pack(fill="both", expand=True)
        self._style_tabs()

    def _style_tabs(self) -> None:
        for tab, button in (("sign_in", self._sign_in_tab), ("sign_up", self._sign_up_tab)):
            active = tab == self._active_tab
            button.configure(
                text_color=ACCENT_PRIMARY if active else TEXT_SECONDARY,
                border_color=ACCENT_PRIMARY if active else INPUT_BORDER,
                border_width=2 if active else 1,
                font=FONT_BUTTON if active else FONT_BODY,
            )

    # ------------------------------------------------------------------
    # Sign in
    # ------------------------------------------------------------------

    def _on_enter_key(self, _event: "tk.Event[tk.Misc]") -> None:
        self._handle_sign_in()

    def _handle_sign_in(self) -> None:
        email = self._email_entry.get()
        password = self._password_entry.get()
        self._set_loading(self._sign_in_button, True, "Signing in...")
        threading.Thread(
            target=self._authenticate,
            args=(email, password),
            name="sign-in",
            daemon=True,
        ).start()

    def _authenticate(self, email: str, password: str) -> None:
        """Worker thread: UI updates go back through ``after(0, ...)``.

        On success the session change re-routes the shell, which
        destroys this view; nothing else to do here.
        """
        try:
            self._auth_service.authenticate(email, password)
        except TicketTrackError as exc:
            message = exc.message
            self.after(0, lambda: self._sign_in_failed(message))

    def _sign_in_failed(self, message: str) -> None:
        self._set_loading(self._sign_in_button, False, "Sign In  →")
        show_error(message, title="Sign In Failed", parent=self)

    # ------------------------------------------------------------------
    # Sign up
    # ------------------------------------------------------------------

    def _handle_sign_up(self) -> None:
        name = self._su_name_entry.get()
        email = self._su_email_entry.get()
        password = self._su_password_entry.get()
        role = _ROLE_LABELS[self._su_role_selector.get()].value

        self._set_loading(self._sign_up_button, True, "Creating account...")
        threading.Thread(
            target=self._register,
            args=(email, password, name, role),
            name="sign-up",
            daemon=True,
        ).start()

    def _register(self, email: str, password: str, name: str, role: str) -> None:
        """Worker thread: UI updates go back through ``after(0, ...)``.

        A successful sign-up is also a sign-in; the router takes over.
        """
        try:
            self._auth_service.register(email, password, name, role)
        except TicketTrackError as exc:
            message = exc.message
            self.after(0, lambda: self._sign_up_failed(message))

    def _sign_up_failed(self, message: str) -> None:
        self._set_loading(self._sign_up_button, False, "Create Account  →")
        show_error(message, title="Sign Up Failed", parent=self)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _set_loading(button: Optional[ctk.CTkButton], loading: bool, text: str) -> None:
        if button is not None:
            button.configure(text=text, state="disabled" if loading else "normal")
