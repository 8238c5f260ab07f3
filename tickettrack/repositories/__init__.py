"""
Repository Layer Package.

Data access over Supabase.  Services never touch ``db.supabase``
directly; they go through these classes (or the ``auth`` module for
sign-in state).
"""

from tickettrack.repositories.base_repository import BaseRepository
from tickettrack.repositories.profile_repository import ProfileRepository
from tickettrack.repositories.ticket_repository import TicketRepository

__all__ = [
    "BaseRepository",
    "ProfileRepository",
    "TicketRepository",
]
