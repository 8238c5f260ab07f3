"""
Ticket Models.

``TicketDraft`` is the insert payload built by ``TicketService``;
``Ticket`` is a row as read back from the ``tickets`` table.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from tickettrack.models.enums import TicketStatus, TicketType

TITLE_MAX_LENGTH: int = 100


class TicketDraft(BaseModel):
    """A ticket about to be inserted.

    ``created_at`` is deliberately absent: the column default
    (``now()``) assigns it server-side.
    """

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1)
    type: TicketType
    status: TicketStatus = TicketStatus.OPEN
    client_id: str
    client_name: str
    client_email: str

    def to_row(self) -> dict[str, str]:
        """Serialise for a PostgREST insert."""
        return self.model_dump(mode="json")


class Ticket(BaseModel):
    """A persisted ticket."""

    id: str
    title: str
    description: str
    type: TicketType
    status: TicketStatus
    client_id: str
    client_name: str
    client_email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @property
    def is_bug(self) -> bool:
        return self.type == TicketType.BUG
