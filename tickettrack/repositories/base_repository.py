"""
Base Repository.

Shared plumbing for the PostgREST-backed repositories: the Supabase
client, the table name, and tolerant handling of single-row reads.
"""

from __future__ import annotations

from typing import Optional

from postgrest import APIResponse
from supabase import Client as SupabaseClient

from tickettrack.database import DatabaseManager
from tickettrack.logger import StructuredLogger

Row = dict[str, object]


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__."""

    def __init__(
        self,
        db: DatabaseManager,
        table: str,
        logger: StructuredLogger,
    ) -> None:
        self._db = db
        self._table = table
        self._logger = logger

    @property
    def table_name(self) -> str:
        return self._table

    @property
    def supabase(self) -> SupabaseClient:
        """The Supabase client (raises ``RuntimeError`` when unconfigured)."""
        return self._db.supabase

    @staticmethod
    def _single_row(response: Optional[APIResponse]) -> Optional[Row]:
        """Extract the row from a ``maybe_single()`` response.

        Recent ``postgrest`` releases return ``None`` instead of an empty
        response when no row matched; both mean "not found".
        """
        if response is None or not response.data:
            return None
        data = response.data
        if isinstance(data, list):
            return data[0] if data else None
        return data

    @staticmethod
    def _rows(response: Optional[APIResponse]) -> list[Row]:
        if response is None or not response.data:
            return []
        return list(response.data)
