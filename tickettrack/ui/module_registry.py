"""Screen Registry.

Maps each user role to the screens it may open.  The shell asks the
registry for the screens of the routed role, builds the sidebar from
them, and opens the role's default screen.
"""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from tickettrack.logger import StructuredLogger
from tickettrack.models.enums import UserRole

ScreenFactory = Callable[[ctk.CTkFrame], ctk.CTkFrame]


class ScreenEntry:
    """One registered screen.

    Attributes
    ----------
    screen_id:
        Unique identifier (e.g. ``'my_tickets'``).
    display_name:
        Sidebar label.
    icon:
        Unicode sidebar icon.
    factory:
        ``(parent) -> CTkFrame``, called each time the screen opens.
    roles:
        Roles that see this screen.
    """

    __slots__ = ("screen_id", "display_name", "icon", "factory", "roles")

    def __init__(
        self,
        screen_id: str,
        display_name: str,
        icon: str,
        factory: ScreenFactory,
        roles: frozenset[UserRole],
    ) -> None:
        self.screen_id = screen_id
        self.display_name = display_name
        self.icon = icon
        self.factory = factory
        self.roles = roles


class ScreenRegistry:
    """Registered screens, in registration order.

    Parameters
    ----------
    logger:
        Structured logger for registration events.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self._entries: dict[str, ScreenEntry] = {}
        self._defaults: dict[UserRole, str] = {}
        self._logger = logger

    def register(
        self,
        screen_id: str,
        display_name: str,
        icon: str,
        factory: ScreenFactory,
        roles: frozenset[UserRole],
        *,
        default: bool = False,
    ) -> None:
        """Register a screen.

        With ``default=True`` the screen opens first for each of its
        roles; otherwise the first screen registered for a role does.
        """
        if screen_id in self._entries:
            self._logger.warning(
                "Screen '%s' already registered; overwriting.", screen_id,
            )
        self._entries[screen_id] = ScreenEntry(
            screen_id=screen_id,
            display_name=display_name,
            icon=icon,
            factory=factory,
            roles=roles,
        )
        for role in roles:
            if default or role not in self._defaults:
                self._defaults[role] = screen_id
        self._logger.info("Screen registered: %s (%s)", screen_id, display_name)

    def screens_for_role(self, role: UserRole) -> list[ScreenEntry]:
        return [entry for entry in self._entries.values() if role in entry.roles]

    def get(self, screen_id: str) -> ScreenEntry:
        """Return the entry for *screen_id*.

        Raises
        ------
        KeyError
            If *screen_id* is not registered.
        """
        if screen_id not in self._entries:
            raise KeyError(f"Screen '{screen_id}' is not registered.")
        return self._entries[screen_id]

    def default_for(self, role: UserRole) -> str:
        """Screen to open after routing to *role* (empty when none)."""
        return self._defaults.get(role, "")
