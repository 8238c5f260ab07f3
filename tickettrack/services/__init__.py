"""
Business Logic Services Package.

``create_services()`` wires the repositories, the Supabase session
store and the services together and returns a typed container the UI
layer consumes without knowing the dependency graph.
"""

from __future__ import annotations

from typing import TypedDict

from tickettrack.auth import SessionManager, SupabaseSessionStore
from tickettrack.config import AppConfig
from tickettrack.database import DatabaseManager
from tickettrack.logger import get_logger
from tickettrack.repositories.profile_repository import ProfileRepository
from tickettrack.repositories.ticket_repository import TicketRepository
from tickettrack.services.auth_service import AuthService
from tickettrack.services.role_router import RoleRouter
from tickettrack.services.ticket_service import TicketService


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    session_store: SupabaseSessionStore
    auth_service: AuthService
    ticket_service: TicketService
    role_router: RoleRouter


def create_services(
    db: DatabaseManager,
    config: AppConfig,
    session: SessionManager,
) -> ServiceContainer:
    """Wire all repositories and services together.

    The single composition root for the service layer.  The router is
    returned un-started; the UI shell starts it once it is listening.
    """
    logger = get_logger("services")

    # ------------------------------------------------------------------
    # 1. Backend adapters
    # ------------------------------------------------------------------
    session_store = SupabaseSessionStore(db=db, session=session, logger=logger)
    profile_repo = ProfileRepository(
        db=db, logger=logger, table=config.PROFILES_TABLE,
    )
    ticket_repo = TicketRepository(
        db=db,
        logger=logger,
        table=config.TICKETS_TABLE,
        poll_interval_s=config.LIVE_QUERY_INTERVAL_S,
        max_poll_interval_s=config.LIVE_QUERY_MAX_INTERVAL_S,
    )

    # ------------------------------------------------------------------
    # 2. Services
    # ------------------------------------------------------------------
    auth_service = AuthService(
        session_store=session_store,
        directory=profile_repo,
        logger=logger,
        role_lookup_retries=config.ROLE_LOOKUP_RETRIES,
        role_lookup_delay_s=config.ROLE_LOOKUP_DELAY_S,
    )
    ticket_service = TicketService(
        session_store=session_store,
        directory=profile_repo,
        tickets=ticket_repo,
        logger=logger,
    )
    role_router = RoleRouter(
        session_store=session_store,
        auth_service=auth_service,
        logger=get_logger("router"),
    )

    return ServiceContainer(
        session_store=session_store,
        auth_service=auth_service,
        ticket_service=ticket_service,
        role_router=role_router,
    )
