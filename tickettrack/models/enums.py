"""
Shared Enumerations.

``StrEnum`` values compare equal to their wire strings, so rows read
from Supabase (``{"status": "open"}``) and enum members are
interchangeable.
"""

from __future__ import annotations

from enum import StrEnum


class UserRole(StrEnum):
    """Authorization role stored on the profile row.  Set once at sign-up."""

    CLIENT = "client"
    ADMIN = "admin"


class TicketType(StrEnum):
    """Kind of ticket a client can file."""

    BUG = "bug"
    FEATURE = "feature"


class TicketStatus(StrEnum):
    """Ticket triage states.

    Any status may follow any other; only admins change it.  New
    tickets always start at ``OPEN``.
    """

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class RouteMode(StrEnum):
    """UI mode selected by the ``RoleRouter``."""

    RESOLVING = "resolving"
    UNAUTHENTICATED = "unauthenticated"
    CLIENT = "client"
    ADMIN = "admin"
