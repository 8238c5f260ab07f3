"""
Identity and Profile Models.

``Identity`` is what the auth service hands back after sign-up or
sign-in.  ``UserProfile`` is the matching row in the ``profiles`` table
and carries the role.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from tickettrack.models.enums import UserRole


class Identity(BaseModel):
    """An authenticated principal.  Immutable for the life of a session."""

    id: str  # Supabase auth UUID
    email: str

    model_config = {"frozen": True, "from_attributes": True}


class UserProfile(BaseModel):
    """Profile row paired 1:1 with an ``Identity``.

    ``role`` is ``None`` when the stored row has no role, or a value
    this client does not recognise; ``AuthService.resolve_role`` turns
    that into ``RoleMissing``.  ``created_at`` is assigned by the
    database and is ``None`` on rows that have not been written yet.
    """

    id: str
    email: str
    name: str
    role: Optional[UserRole] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("role", mode="before")
    @classmethod
    def _unknown_role_is_missing(cls, value: object) -> object:
        if value is None or value in {r.value for r in UserRole}:
            return value
        return None

    @property
    def display_name(self) -> str:
        """Name to stamp on tickets; falls back to the email address."""
        return self.name.strip() or self.email
