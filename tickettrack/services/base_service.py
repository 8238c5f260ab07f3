"""
Base Service Class.

Standardises the logger attribute for every service and the rule that
no raw backend exception leaves the service layer.
"""

from __future__ import annotations

from tickettrack.errors import ErrorCode, ServiceError, TicketTrackError
from tickettrack.logger import StructuredLogger

NETWORK_MESSAGE: str = "Cannot reach the server. Check your internet connection."


class BaseService:
    """Base class for all service classes. Provides a logger."""

    def __init__(self, logger: StructuredLogger) -> None:
        self._logger: StructuredLogger = logger

    def _normalize_error(self, exc: Exception, fallback: str) -> TicketTrackError:
        """Return *exc* as a ``TicketTrackError`` with a displayable message.

        ``RuntimeError`` is what ``DatabaseManager.supabase`` raises when
        the backend is not configured, so it is reported like a network
        failure.
        """
        if isinstance(exc, TicketTrackError):
            return exc
        if isinstance(exc, (ConnectionError, TimeoutError, RuntimeError)):
            self._logger.warning("Backend unreachable: %s", exc)
            return ServiceError(NETWORK_MESSAGE, ErrorCode.NETWORK_ERROR)
        self._logger.error("Backend call failed: %s", exc, exc_info=exc)
        return ServiceError(fallback)
