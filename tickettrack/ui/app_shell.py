"""Application Host Shell.

The top-level ``CTk`` window.  It listens to the ``RoleRouter`` and
renders whatever the current route calls for:

- ``resolving``        a loading screen
- ``unauthenticated``  the ``LoginView`` (plus an alert if the route
  carries an error)
- ``client`` / ``admin`` the sidebar and the role's screens

Route changes arrive on whichever thread caused them and are moved
onto the Tk loop with ``after(0, ...)``.  Every route change tears the
previous screen down, which cancels its ticket subscriptions.
"""

from __future__ import annotations

import threading
import tkinter as tk
from typing import Callable, Optional

import customtkinter as ctk

from tickettrack import __version__ as _APP_VERSION
from tickettrack.contracts import Unsubscribe
from tickettrack.errors import SignOutError
from tickettrack.logger import StructuredLogger
from tickettrack.models.enums import RouteMode
from tickettrack.models.route import RouteState
from tickettrack.services import ServiceContainer
from tickettrack.ui.alerts import show_error
from tickettrack.ui.login_view import LoginView
from tickettrack.ui.module_registry import ScreenRegistry
from tickettrack.ui.sidebar import SidebarNav
from tickettrack.ui.theme import (
    CONTENT_BG,
    FONT_BODY,
    LOGIN_WINDOW_HEIGHT,
    LOGIN_WINDOW_WIDTH,
    MAIN_WINDOW_HEIGHT,
    MAIN_WINDOW_WIDTH,
    TEXT_SECONDARY,
)


class AppShell(ctk.CTk):
    """Host Shell: the main application window.

    Parameters
    ----------
    services:
        Wired service container; its router is started here.
    registry:
        Screens per role, populated before launch.
    logger:
        Structured logger.
    """

    def __init__(
        self,
        services: ServiceContainer,
        registry: ScreenRegistry,
        logger: StructuredLogger,
    ) -> None:
        super().__init__()

        self._services = services
        self._registry = registry
        self._logger = logger

        self._rendered: Optional[RouteState] = None
        self._body: Optional[ctk.CTkFrame] = None
        self._sidebar: Optional[SidebarNav] = None
        self._content: Optional[ctk.CTkFrame] = None
        self._screen: Optional[ctk.CTkFrame] = None
        self._active_screen_id: Optional[str] = None
        self._closing: bool = False

        self.title(f"TicketTrack {_APP_VERSION}")
        self.geometry(f"{MAIN_WINDOW_WIDTH}x{MAIN_WINDOW_HEIGHT}")
        self.minsize(LOGIN_WINDOW_WIDTH, LOGIN_WINDOW_HEIGHT)
        ctk.set_appearance_mode("light")
        ctk.set_default_color_theme("blue")
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        router = self._services["role_router"]
        self._unlisten: Unsubscribe = router.add_listener(self._on_route)
        self._render(router.state)
        router.start()

    # ==================================================================
    # Routing
    # ==================================================================

    def _on_route(self, state: RouteState) -> None:
        """Router listener; may run on the role-resolver thread."""
        if self._closing:
            return
        try:
            self.after(0, self._render, state)
        except (RuntimeError, tk.TclError) as exc:
            self._logger.debug("Window gone before route render: %s", exc)

    def _render(self, state: RouteState) -> None:
        """The single place a route is turned into a screen."""
        if self._closing or state == self._rendered:
            return
        self._rendered = state
        self._clear()

        if state.mode is RouteMode.RESOLVING:
            self._show_resolving()
        elif state.mode is RouteMode.UNAUTHENTICATED:
            self._show_login(state.error)
        else:
            self._show_main(state)

    def _clear(self) -> None:
        self._sidebar = None
        self._content = None
        self._screen = None
        self._active_screen_id = None
        if self._body is not None:
            self._body.destroy()
            self._body = None

    # ==================================================================
    # Screens
    # ==================================================================

    def _show_resolving(self) -> None:
        self._body = ctk.CTkFrame(self, fg_color=CONTENT_BG, corner_radius=0)
        self._body.pack(fill="both", expand=True)
        ctk.CTkLabel(
            self._body, text="Loading...", font=FONT_BODY, text_color=TEXT_SECONDARY,
        ).place(relx=0.5, rely=0.5, anchor="center")

    def _show_login(self, error: Optional[str]) -> None:
        login = LoginView(
            parent=self,
            auth_service=self._services["auth_service"],
            logger=self._logger,
        )
        login.pack(fill="both", expand=True)
        self._body = login
        if error:
            self.after(100, lambda: login.show_message(error))

    def _show_main(self, state: RouteState) -> None:
        self._body = ctk.CTkFrame(self, fg_color=CONTENT_BG, corner_radius=0)
        self._body.pack(fill="both", expand=True)

        self._sidebar = SidebarNav(
            parent=self._body,
            identity=state.identity,
            role=state.role,
            on_screen_selected=self._switch_screen,
            on_sign_out=self._handle_sign_out,
        )
        self._sidebar.pack(side="left", fill="y")

        self._content = ctk.CTkFrame(self._body, fg_color=CONTENT_BG, corner_radius=0)
        self._content.pack(side="left", fill="both", expand=True)

        screens = self._registry.screens_for_role(state.role)
        for entry in screens:
            self._sidebar.add_screen(entry.screen_id, entry.display_name, entry.icon)

        if not screens:
            self._logger.warning("No screens registered for role '%s'.", state.role)
            ctk.CTkLabel(
                self._content,
                text="No screens available for your role.",
                font=FONT_BODY,
                text_color=TEXT_SECONDARY,
            ).place(relx=0.5, rely=0.5, anchor="center")
            return

        self._switch_screen(self._registry.default_for(state.role))

    def _switch_screen(self, screen_id: str) -> None:
        """Destroy the current screen and build *screen_id* fresh."""
        if screen_id == self._active_screen_id or self._content is None:
            return
        try:
            entry = self._registry.get(screen_id)
        except KeyError:
            self._logger.error("Cannot switch to unregistered screen: %s", screen_id)
            return

        if self._screen is not None:
            self._screen.destroy()
        self._screen = entry.factory(self._content)
        self._screen.pack(fill="both", expand=True)
        self._active_screen_id = screen_id
        if self._sidebar is not None:
            self._sidebar.set_active(screen_id)
        self._logger.info("Switched to screen: %s", screen_id)

    # ==================================================================
    # Sign-out
    # ==================================================================

    def _handle_sign_out(self) -> None:
        if self._sidebar is not None:
            self._sidebar.set_signing_out(True)
        self._run_in_background(self._sign_out, "sign-out")

    def _sign_out(self) -> None:
        """Worker thread.  Success re-routes through the session change."""
        try:
            self._services["auth_service"].end_session()
        except SignOutError as exc:
            message = exc.message
            self.after(0, lambda: self._sign_out_failed(message))

    def _sign_out_failed(self, message: str) -> None:
        if self._sidebar is not None:
            self._sidebar.set_signing_out(False)
        show_error(message, parent=self)

    @staticmethod
    def _run_in_background(work: Callable[[], None], name: str) -> None:
        threading.Thread(target=work, name=name, daemon=True).start()

    # ==================================================================
    # Window close
    # ==================================================================

    def _on_close(self) -> None:
        """Stop routing and cancel live subscriptions before destroying."""
        self._closing = True
        self._unlisten()
        self._services["role_router"].stop()
        self._clear()
        self._services["session_store"].close()
        self.destroy()
