"""Highlight tracking and pinning of the process detail view."""

import logging

from pyprocs.models import Session
from pyprocs.presenter import PresentationSink, ProcessDetail, describe_process, present
from pyprocs.registry import ProcessRegistry

logger = logging.getLogger(__name__)


class SelectionController:
    """
    Tracks the highlighted process and toggles the pinned detail view.

    Pinning sets the session's refresh lock so the detail cannot change
    under the operator. Only one process is pinned at a time.
    """

    def __init__(
        self,
        session: Session,
        registry: ProcessRegistry,
        sink: PresentationSink,
    ) -> None:
        self._session = session
        self._registry = registry
        self._sink = sink

    @property
    def session(self) -> Session:
        return self._session

    def on_highlight(self, pid: int | None) -> None:
        """Record which process is highlighted. None means nothing is."""
        self._session.highlighted_pid = pid

    def on_select(self, pid: int) -> ProcessDetail | None:
        """
        Toggle the pinned detail view for ``pid``.

        Returns:
            The rendered detail if the view is now pinned, else None.
        """
        self._session.highlighted_pid = pid

        if self._session.pinned:
            self._session.unpin()
            logger.debug("Unpinned process %d", pid)
            # Redraw from the current registry; the next tick fetches as usual
            self._sink.render_list(present(self._registry.snapshot))
            return None

        self._session.pin()
        process = self._registry.lookup(pid)
        if process is None:
            self._session.unpin()
            self._sink.notify("Process not found", severity="warning")
            return None

        detail = describe_process(process)
        self._sink.render_detail(detail)
        logger.debug("Pinned process %d", pid)
        return detail
