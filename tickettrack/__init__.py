"""TicketTrack: bug / feature ticket client backed by Supabase."""

__version__ = "1.0.0"
