"""
Data Models Package.

    from tickettrack.models import Identity, UserProfile, Ticket, TicketStatus
"""

from tickettrack.models.enums import RouteMode, TicketStatus, TicketType, UserRole
from tickettrack.models.route import RouteState
from tickettrack.models.ticket import TITLE_MAX_LENGTH, Ticket, TicketDraft
from tickettrack.models.user import Identity, UserProfile

__all__ = [
    "Identity",
    "RouteMode",
    "RouteState",
    "TITLE_MAX_LENGTH",
    "Ticket",
    "TicketDraft",
    "TicketStatus",
    "TicketType",
    "UserProfile",
    "UserRole",
]
