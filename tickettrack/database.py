"""
Backend Connection.

Owns the single Supabase client for the process.  Auth, the
``profiles`` table and the ``tickets`` table are all reached through
it; this module contains no query logic.

Usage (dependency injection at app startup)::

    db = DatabaseManager(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="database"),
    )
"""

from __future__ import annotations

from typing import Optional

from supabase import Client as SupabaseClient, create_client

from tickettrack.logger import StructuredLogger


class DatabaseManager:
    """Holds the Supabase client.

    When the URL or key is empty no client is created and the
    ``supabase`` property raises ``RuntimeError``.  The service layer
    maps that to a "cannot reach the server" message, so an
    unconfigured install still starts and shows the login screen.

    Parameters
    ----------
    supabase_url:
        Project URL (e.g. ``https://xyz.supabase.co``).
    supabase_key:
        The project's anon key.  Row-level security does the rest.
    logger:
        Structured logger.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        logger: StructuredLogger,
    ) -> None:
        self._logger: StructuredLogger = logger
        self._supabase: Optional[SupabaseClient] = None

        if not (supabase_url and supabase_key):
            self._logger.warning(
                "Supabase credentials not configured; backend unavailable."
            )
            return

        try:
            self._supabase = create_client(supabase_url, supabase_key)
            self._logger.info("Supabase client initialized.")
        except (ValueError, TypeError) as exc:
            self._logger.warning(
                "Supabase credential format error: %s. Backend unavailable.",
                exc,
            )
        except Exception as exc:
            self._logger.error(
                "Unexpected Supabase initialization failure: %s.",
                exc,
                exc_info=True,
            )

    @property
    def supabase(self) -> SupabaseClient:
        """The initialised client.

        Raises
        ------
        RuntimeError
            If the client was not created.
        """
        if self._supabase is None:
            raise RuntimeError(
                "Supabase client is not initialised. "
                "Check SUPABASE_URL and SUPABASE_ANON_KEY."
            )
        return self._supabase

    @property
    def is_online(self) -> bool:
        """``True`` when a Supabase client exists."""
        return self._supabase is not None
