"""
Route State.

Tagged variant published by ``RoleRouter``.  The UI shell switches on
``mode`` in exactly one place.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from tickettrack.models.enums import RouteMode, UserRole
from tickettrack.models.user import Identity


class RouteState(BaseModel):
    """Current UI mode plus the data that mode needs.

    Attributes
    ----------
    mode:
        Which screen set is reachable.
    identity:
        The signed-in identity for ``CLIENT`` / ``ADMIN``; ``None`` otherwise.
    role:
        Resolved role for ``CLIENT`` / ``ADMIN``; ``None`` otherwise.
    error:
        Message explaining a forced sign-out, shown once on the login screen.
    """

    mode: RouteMode
    identity: Optional[Identity] = None
    role: Optional[UserRole] = None
    error: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def resolving(cls) -> "RouteState":
        return cls(mode=RouteMode.RESOLVING)

    @classmethod
    def unauthenticated(cls, error: Optional[str] = None) -> "RouteState":
        return cls(mode=RouteMode.UNAUTHENTICATED, error=error)

    @classmethod
    def for_role(cls, identity: Identity, role: UserRole) -> "RouteState":
        mode = RouteMode.ADMIN if role == UserRole.ADMIN else RouteMode.CLIENT
        return cls(mode=mode, identity=identity, role=role)
