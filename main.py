"""
TicketTrack Desktop Application Entry Point.

Builds the dependency graph by constructor injection and launches the
CustomTkinter GUI.  Every subsystem is wired here; there are no
module-level globals.

Usage::

    python main.py
"""

from __future__ import annotations

import sys
import traceback

from tickettrack.auth import SessionManager
from tickettrack.config import get_config
from tickettrack.database import DatabaseManager
from tickettrack.logger import StructuredLogger, get_logger
from tickettrack.models.enums import UserRole
from tickettrack.services import create_services
from tickettrack.ui.app_shell import AppShell
from tickettrack.ui.module_registry import ScreenRegistry
from tickettrack.ui.views.all_tickets_view import AllTicketsView
from tickettrack.ui.views.create_ticket_view import CreateTicketView
from tickettrack.ui.views.my_tickets_view import MyTicketsView


def main() -> None:
    """Application entry point: wire dependencies and launch the GUI."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting TicketTrack...")

    # ------------------------------------------------------------------
    # 1. Configuration (from .env / environment variables)
    # ------------------------------------------------------------------
    config = get_config()

    # ------------------------------------------------------------------
    # 2. Backend connection
    # ------------------------------------------------------------------
    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="database"),
    )

    # ------------------------------------------------------------------
    # 3. Session context (process-wide, cleared at sign-out)
    # ------------------------------------------------------------------
    session = SessionManager(logger=get_logger("session"))

    # ------------------------------------------------------------------
    # 4. Service container (single composition root)
    # ------------------------------------------------------------------
    services = create_services(db=db, config=config, session=session)
    ticket_service = services["ticket_service"]

    # ------------------------------------------------------------------
    # 5. Screens per role
    # ------------------------------------------------------------------
    registry = ScreenRegistry(logger=get_logger("screens"))

    registry.register(
        screen_id="my_tickets",
        display_name="My Tickets",
        icon="\U0001F4CB",  # Clipboard
        factory=lambda parent: MyTicketsView(
            parent=parent,
            ticket_service=ticket_service,
            logger=get_logger("my_tickets"),
        ),
        roles=frozenset({UserRole.CLIENT}),
        default=True,
    )
    registry.register(
        screen_id="new_ticket",
        display_name="New Ticket",
        icon="✚",  # Heavy plus
        factory=lambda parent: CreateTicketView(
            parent=parent,
            ticket_service=ticket_service,
            logger=get_logger("new_ticket"),
        ),
        roles=frozenset({UserRole.CLIENT}),
    )
    registry.register(
        screen_id="all_tickets",
        display_name="All Tickets",
        icon="\U0001F5C2",  # Card index dividers
        factory=lambda parent: AllTicketsView(
            parent=parent,
            ticket_service=ticket_service,
            logger=get_logger("all_tickets"),
        ),
        roles=frozenset({UserRole.ADMIN}),
        default=True,
    )

    # ------------------------------------------------------------------
    # 6. Launch the GUI (blocks until the window closes)
    # ------------------------------------------------------------------
    logger.info("Launching GUI...")
    app = AppShell(services=services, registry=registry, logger=get_logger("ui"))
    app.mainloop()
    logger.info("TicketTrack shut down.")


def _show_fatal_error(exc: BaseException) -> None:
    """Show a fatal-error dialog, falling back to stderr without Tk."""
    detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    try:
        import tkinter
        from tkinter import messagebox

        root = tkinter.Tk()
        root.withdraw()
        messagebox.showerror(
            title="TicketTrack: Fatal Error",
            message=(
                "The application hit an unexpected error and cannot "
                "continue.\n\n"
                f"{type(exc).__name__}: {exc}"
            ),
            detail=detail,
        )
        root.destroy()
    except Exception:
        sys.stderr.write(f"FATAL: {type(exc).__name__}: {exc}\n{detail}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        _show_fatal_error(exc)
        sys.exit(1)
