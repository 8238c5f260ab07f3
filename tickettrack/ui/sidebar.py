"""Sidebar Navigation Component.

Shows the signed-in account, one button per screen available to the
routed role, and the sign-out control.  All actions go out through
injected callbacks.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from tickettrack.models.enums import UserRole
from tickettrack.models.user import Identity
from tickettrack.ui.theme import (
    ACCENT_PRIMARY,
    FONT_BODY,
    FONT_SIDEBAR,
    FONT_SIDEBAR_ACTIVE,
    FONT_SMALL,
    PADDING_MD,
    PADDING_SM,
    SIDEBAR_ACTIVE,
    SIDEBAR_BG,
    SIDEBAR_HOVER,
    SIDEBAR_TEXT,
    SIDEBAR_WIDTH,
    SIGN_OUT_HOVER,
    SIGN_OUT_TEXT,
    TEXT_LIGHT,
)

_AVATAR_SIZE: int = 40


class _ScreenButton(ctk.CTkButton):
    """Sidebar entry for one screen."""

    def __init__(
        self,
        parent: ctk.CTkFrame,
        screen_id: str,
        display_name: str,
        icon: str,
        on_click: Callable[[str], None],
    ) -> None:
        self._screen_id = screen_id
        super().__init__(
            parent,
            text=f"  {icon}   {display_name}",
            anchor="w",
            font=FONT_SIDEBAR,
            text_color=SIDEBAR_TEXT,
            fg_color="transparent",
            hover_color=SIDEBAR_HOVER,
            height=40,
            corner_radius=6,
            command=lambda: on_click(self._screen_id),
        )

    def set_active(self, active: bool) -> None:
        if active:
            self.configure(fg_color=SIDEBAR_ACTIVE, font=FONT_SIDEBAR_ACTIVE)
        else:
            self.configure(fg_color="transparent", font=FONT_SIDEBAR)


class SidebarNav(ctk.CTkFrame):
    """Sidebar for a routed (client or admin) session.

    Parameters
    ----------
    parent:
        The shell window.
    identity:
        Signed-in account; its email is shown.
    role:
        Routed role, shown under the email.
    on_screen_selected:
        Called with a ``screen_id``.
    on_sign_out:
        Called when the sign-out button is pressed.
    """

    def __init__(
        self,
        parent: ctk.CTk,
        identity: Identity,
        role: UserRole,
        on_screen_selected: Callable[[str], None],
        on_sign_out: Callable[[], None],
    ) -> None:
        super().__init__(parent, width=SIDEBAR_WIDTH, fg_color=SIDEBAR_BG, corner_radius=0)
        self.pack_propagate(False)

        self._on_screen_selected = on_screen_selected
        self._on_sign_out = on_sign_out
        self._buttons: dict[str, _ScreenButton] = {}
        self._active_id: Optional[str] = None
        self._sign_out_button: Optional[ctk.CTkButton] = None

        self._build_ui(identity, role)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_screen(self, screen_id: str, display_name: str, icon: str) -> None:
        btn = _ScreenButton(
            parent=self._screens_frame,
            screen_id=screen_id,
            display_name=display_name,
            icon=icon,
            on_click=self._on_screen_selected,
        )
        btn.pack(fill="x", padx=PADDING_SM, pady=2)
        self._buttons[screen_id] = btn

    def set_active(self, screen_id: str) -> None:
        if self._active_id in self._buttons:
            self._buttons[self._active_id].set_active(False)
        if screen_id in self._buttons:
            self._buttons[screen_id].set_active(True)
        self._active_id = screen_id

    def set_signing_out(self, busy: bool) -> None:
        if self._sign_out_button is not None:
            self._sign_out_button.configure(
                text="  ⏻   Signing out..." if busy else "  ⏻   Sign Out",
                state="disabled" if busy else "normal",
            )

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_ui(self, identity: Identity, role: UserRole) -> None:
        user_frame = ctk.CTkFrame(self, fg_color="transparent")
        user_frame.pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, PADDING_SM))

        row = ctk.CTkFrame(user_frame, fg_color="transparent")
        row.pack(fill="x")

        avatar = ctk.CTkFrame(
            row,
            width=_AVATAR_SIZE,
            height=_AVATAR_SIZE,
            corner_radius=_AVATAR_SIZE // 2,
            fg_color=ACCENT_PRIMARY,
        )
        avatar.pack(side="left", padx=(0, 10))
        avatar.pack_propagate(False)
        ctk.CTkLabel(
            avatar,
            text=(identity.email[:1] or "?").upper(),
            font=FONT_SIDEBAR_ACTIVE,
            text_color=TEXT_LIGHT,
        ).place(relx=0.5, rely=0.5, anchor="center")

        text_frame = ctk.CTkFrame(row, fg_color="transparent")
        text_frame.pack(side="left", fill="x", expand=True)
        ctk.CTkLabel(
            text_frame,
            text=identity.email,
            font=FONT_SMALL,
            text_color=TEXT_LIGHT,
            anchor="w",
        ).pack(fill="x")
        ctk.CTkLabel(
            text_frame,
            text=role.value.capitalize(),
            font=FONT_SMALL,
            text_color=SIDEBAR_TEXT,
            anchor="w",
        ).pack(fill="x")

        ctk.CTkFrame(self, height=1, fg_color=SIDEBAR_HOVER).pack(
            fill="x", padx=PADDING_MD, pady=PADDING_SM,
        )

        self._screens_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._screens_frame.pack(fill="both", expand=True, pady=PADDING_SM)

        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.pack(fill="x", padx=PADDING_SM, pady=PADDING_SM, side="bottom")
        self._sign_out_button = ctk.CTkButton(
            bottom,
            text="  ⏻   Sign Out",
            font=FONT_BODY,
            fg_color="transparent",
            hover_color=SIGN_OUT_HOVER,
            text_color=SIGN_OUT_TEXT,
            anchor="w",
            height=36,
            corner_radius=6,
            command=self._on_sign_out,
        )
        self._sign_out_button.pack(fill="x")
