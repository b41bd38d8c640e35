"""Periodic refresh of the process registry."""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from pyprocs.models import ProcessRecord, Session
from pyprocs.presenter import rank_processes
from pyprocs.registry import ProcessRegistry

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 5.0
MIN_INTERVAL = 0.1


class SnapshotSource(Protocol):
    """Anything that can sample the process table."""

    def refresh_processes(self) -> None: ...

    def processes(self) -> list[ProcessRecord]: ...


class RefreshScheduler:
    """
    Re-polls the snapshot source on a fixed interval.

    Runs as a task on the current asyncio loop. The blocking fetch is
    pushed to a worker thread. The next tick is armed only after the
    previous one settles, so at most one fetch is ever in flight.

    While ``session.refresh_lock`` is set, ticks keep firing but skip the
    fetch. A fetch that completes after the lock was set is discarded.
    """

    def __init__(
        self,
        source: SnapshotSource,
        registry: ProcessRegistry,
        session: Session,
        *,
        interval: float = DEFAULT_INTERVAL,
        on_refresh: Callable[[tuple[ProcessRecord, ...]], None] | None = None,
        on_error: Callable[[OSError], None] | None = None,
    ) -> None:
        """
        Initialize the RefreshScheduler.

        Args:
            source: Process table collaborator.
            registry: Registry that receives each new snapshot.
            session: Shared view state holding the refresh lock.
            interval: Seconds between ticks. Default 5.0s.
            on_refresh: Called with the snapshot after every install.
            on_error: Called with the error after a failed fetch.
        """
        self._source = source
        self._registry = registry
        self._session = session
        self._interval = max(MIN_INTERVAL, interval)
        self._on_refresh = on_refresh
        self._on_error = on_error
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        """Get the current tick interval."""
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        """Set the tick interval."""
        self._interval = max(MIN_INTERVAL, value)

    @property
    def is_running(self) -> bool:
        """Check if the refresh loop is running."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the refresh loop on the running event loop."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self.run(), name="RefreshScheduler")

    def stop(self) -> None:
        """Stop the refresh loop. An in-flight fetch is abandoned."""
        self._stop_event.set()
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def run(self) -> None:
        """Tick immediately, then every ``interval`` seconds until stopped."""
        while not self._stop_event.is_set():
            await self.tick()

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass

    async def tick(self) -> bool:
        """
        Run one refresh cycle.

        Returns:
            True if a new snapshot was installed.
        """
        if self._session.refresh_lock:
            logger.debug("Refresh locked, skipping fetch")
            return False

        try:
            processes = await asyncio.to_thread(self._fetch)
        except OSError as exc:
            logger.warning("Process refresh failed: %s", exc)
            if self._on_error is not None:
                self._on_error(exc)
            return False

        if self._session.refresh_lock:
            logger.debug("View pinned during fetch, discarding %d processes", len(processes))
            return False

        self._registry.replace(processes)
        if self._on_refresh is not None:
            self._on_refresh(self._registry.snapshot)
        return True

    def _fetch(self) -> list[ProcessRecord]:
        """Sample the source. Runs on a worker thread."""
        self._source.refresh_processes()
        return rank_processes(self._source.processes())
