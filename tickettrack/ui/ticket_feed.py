"""
Ticket Feed.

State behind a ticket list screen: the last delivered ticket list plus
``loading``, ``refreshing`` and ``error`` flags.  Holds no widgets, so
list screens stay thin and the state logic is testable without Tk.

Callbacks from the live query arrive on its poll thread; ``on_change``
is invoked on that same thread and the owning widget is expected to
marshal onto the UI loop with ``after(0, ...)``.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from tickettrack.contracts import ErrorCallback, Subscription, TicketsCallback
from tickettrack.errors import TicketTrackError
from tickettrack.logger import StructuredLogger
from tickettrack.models.ticket import Ticket

WatchFn = Callable[[TicketsCallback, Optional[ErrorCallback]], Subscription]


class TicketFeed:
    """Owns one ticket subscription and the list state derived from it.

    Parameters
    ----------
    watch:
        ``TicketService.watch_own_tickets`` or ``watch_all_tickets``.
    logger:
        Structured logger.
    on_change:
        Called with the feed after every state change.
    """

    def __init__(
        self,
        watch: WatchFn,
        logger: StructuredLogger,
        on_change: Optional[Callable[["TicketFeed"], None]] = None,
    ) -> None:
        self._watch = watch
        self._logger = logger
        self._on_change = on_change

        self._lock: threading.Lock = threading.Lock()
        self._subscription: Optional[Subscription] = None
        self._tickets: list[Ticket] = []
        self._loading: bool = False
        self._refreshing: bool = False
        self._error: Optional[str] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def tickets(self) -> list[Ticket]:
        with self._lock:
            return list(self._tickets)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def refreshing(self) -> bool:
        return self._refreshing

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._tickets)

    @property
    def is_empty(self) -> bool:
        """True once data has arrived and there is none to show."""
        return not self._loading and self._error is None and self.count == 0

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None

    def header_text(self) -> str:
        count = self.count
        return f"{count} ticket" if count == 1 else f"{count} tickets"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Open the subscription.  A second call while open does nothing."""
        if self._subscription is not None:
            return
        self._loading = True
        self._error = None
        self._changed()
        try:
            self._subscription = self._watch(self._handle_data, self._handle_error)
        except TicketTrackError as exc:
            self._loading = False
            self._error = exc.message
            self._logger.warning("Ticket subscription failed: %s", exc.message)
            self._changed()

    def close(self) -> None:
        """Cancel the subscription.  Safe to call more than once."""
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.cancel()

    def retry(self) -> None:
        """Drop the current subscription and open a fresh one."""
        self.close()
        self.start()

    def begin_refresh(self) -> None:
        """Show the pull-to-refresh indicator.

        No query is re-issued; the subscription is already live.
        """
        self._refreshing = True
        self._changed()

    def end_refresh(self) -> None:
        if self._refreshing:
            self._refreshing = False
            self._changed()

    # ------------------------------------------------------------------
    # Subscription callbacks
    # ------------------------------------------------------------------

    def _handle_data(self, tickets: list[Ticket]) -> None:
        with self._lock:
            self._tickets = list(tickets)
        self._loading = False
        self._refreshing = False
        self._error = None
        self._changed()

    def _handle_error(self, exc: Exception) -> None:
        self._loading = False
        self._refreshing = False
        self._error = getattr(exc, "message", None) or str(exc) or "Failed to load tickets."
        self._changed()

    def _changed(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self)
        except Exception:
            self._logger.exception("Ticket feed listener failed.")
