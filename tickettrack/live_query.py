"""
Live Query.

A cancellable stream of full result sets.  A daemon thread re-runs a
fetch function on an interval and emits the complete ordered list
whenever it differs from the last emission (the first successful fetch
always emits).  Consumers get the data two ways:

- ``on_data`` / ``on_error`` callbacks, invoked on the poll thread;
- ``snapshots()``, a lazy iterator that yields the most recent result
  set each time a new one arrives and ends when the query is cancelled.

The sync Supabase client has no realtime channel support, so change
detection is done by comparing snapshots.  While the fetch keeps
failing the interval backs off exponentially (capped), and ``on_error``
fires once per distinct failure message rather than once per poll.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, Iterator, Optional, TypeVar

from pydantic import BaseModel

from tickettrack.logger import StructuredLogger

T = TypeVar("T", bound=BaseModel)


class LiveQuery(Generic[T]):
    """Polling subscription that behaves like a push subscription.

    Parameters
    ----------
    fetch:
        Zero-argument callable returning the full, already ordered
        result set.
    on_data:
        Receives every new result set.
    on_error:
        Receives fetch failures.  Never raises back into the poll loop.
    interval_s:
        Delay between polls while healthy.
    max_interval_s:
        Backoff ceiling while the fetch is failing.
    logger:
        Structured logger.
    name:
        Thread / log label.
    """

    def __init__(
        self,
        fetch: Callable[[], list[T]],
        on_data: Callable[[list[T]], None],
        on_error: Optional[Callable[[Exception], None]],
        interval_s: float,
        max_interval_s: float,
        logger: StructuredLogger,
        name: str = "live-query",
    ) -> None:
        self._logger: StructuredLogger = logger
        self._fetch = fetch
        self._on_data = on_data
        self._on_error = on_error
        self._interval_s = interval_s
        self._max_interval_s = max(max_interval_s, interval_s)
        self._name = name

        self._stop_event: threading.Event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._cancel_lock: threading.Lock = threading.Lock()

        self._fingerprint: Optional[tuple[str, ...]] = None
        self._last_error: Optional[str] = None
        self._consecutive_failures: int = 0

        # Latest emission for snapshots(); version bumps on every emit.
        self._cond: threading.Condition = threading.Condition()
        self._latest: Optional[list[T]] = None
        self._version: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> "LiveQuery[T]":
        """Start polling on a daemon thread.  No-op if already running or cancelled."""
        if self._stop_event.is_set():
            return self
        if self._thread is not None and self._thread.is_alive():
            return self

        self._thread = threading.Thread(
            target=self._run_loop,
            name=self._name,
            daemon=True,
        )
        self._thread.start()
        self._logger.debug("Live query started: %s", self._name)
        return self

    def cancel(self, wait: bool = False) -> None:
        """Stop delivery.  Safe to call any number of times from any thread.

        Returns immediately by default; a fetch already in flight finishes
        on the poll thread and its result is discarded.  Pass ``wait=True``
        to join the poll thread (never from the Tk thread).
        """
        with self._cancel_lock:
            if self._stop_event.is_set():
                return
            self._stop_event.set()

        with self._cond:
            self._cond.notify_all()

        thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout=5.0)
        self._logger.debug("Live query cancelled: %s", self._name)

    __call__ = cancel

    @property
    def active(self) -> bool:
        return not self._stop_event.is_set()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll(self) -> bool:
        """Run one fetch-compare-emit cycle.

        Returns ``True`` when the fetch succeeded (whether or not the
        result changed).
        """
        if self._stop_event.is_set():
            return False

        try:
            rows = self._fetch()
        except Exception as exc:
            self._consecutive_failures += 1
            # The next successful fetch must emit, even if unchanged.
            self._fingerprint = None
            message = str(exc)
            if message != self._last_error:
                self._last_error = message
                self._logger.warning(
                    "Live query %s failed: %s", self._name, exc,
                )
                self._emit_error(exc)
            return False

        self._consecutive_failures = 0
        self._last_error = None

        fingerprint = tuple(row.model_dump_json() for row in rows)
        if fingerprint == self._fingerprint:
            return True
        self._fingerprint = fingerprint

        if self._stop_event.is_set():
            return True

        with self._cond:
            self._latest = list(rows)
            self._version += 1
            self._cond.notify_all()

        try:
            self._on_data(list(rows))
        except Exception:
            self._logger.exception(
                "Live query %s data callback raised.", self._name,
            )
        return True

    def snapshots(self, timeout: Optional[float] = None) -> Iterator[list[T]]:
        """Yield each new result set until cancelled.

        Slow consumers skip straight to the newest result set.  With a
        *timeout*, iteration also ends when nothing new arrives in time.
        """
        seen = 0
        while True:
            with self._cond:
                arrived = self._cond.wait_for(
                    lambda: self._version > seen or self._stop_event.is_set(),
                    timeout=timeout,
                )
                if not arrived or self._version == seen:
                    return
                seen = self._version
                latest = list(self._latest or [])
            yield latest

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            self.poll()
            self._stop_event.wait(self._next_delay())

    def _next_delay(self) -> float:
        if self._consecutive_failures == 0:
            return self._interval_s
        backoff = self._interval_s * (2 ** min(self._consecutive_failures, 10))
        return min(backoff, self._max_interval_s)

    def _emit_error(self, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception:
            self._logger.exception(
                "Live query %s error callback raised.", self._name,
            )
