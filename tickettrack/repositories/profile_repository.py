"""
Profile Repository.

The directory of ``UserProfile`` rows, keyed by auth user id.  Point
reads and inserts only; profiles are never updated or deleted here.
"""

from __future__ import annotations

from typing import Optional

from tickettrack.database import DatabaseManager
from tickettrack.logger import StructuredLogger
from tickettrack.models.user import UserProfile
from tickettrack.repositories.base_repository import BaseRepository


class ProfileRepository(BaseRepository):
    """``DirectoryStore`` over the ``profiles`` table.

    Exceptions from the client propagate unchanged; the service layer
    decides how to word them.
    """

    def __init__(
        self,
        db: DatabaseManager,
        logger: StructuredLogger,
        table: str = "profiles",
    ) -> None:
        super().__init__(db, table, logger)

    def get(self, user_id: str) -> Optional[UserProfile]:
        """Fetch a profile by id, or ``None`` when no row is visible."""
        response = (
            self.supabase.table(self.table_name)
            .select("*")
            .eq("id", user_id)
            .maybe_single()
            .execute()
        )
        row = self._single_row(response)
        return UserProfile.model_validate(row) if row else None

    def put(self, profile: UserProfile) -> None:
        """Insert *profile*.  ``created_at`` is left to the column default."""
        row = profile.model_dump(mode="json", exclude={"created_at"})
        self.supabase.table(self.table_name).insert(row).execute()
        self._logger.info("Profile row written: %s", profile.id)
