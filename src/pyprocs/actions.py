"""Operator actions on the highlighted process."""

import logging
from typing import Protocol

from pyprocs.models import ProcessAction, Session
from pyprocs.presenter import Clipboard, PresentationSink
from pyprocs.registry import ProcessRegistry

logger = logging.getLogger(__name__)


class ProcessKiller(Protocol):
    """Anything that can terminate a process by pid."""

    def kill_pid(self, pid: int) -> None: ...


class ActionDispatcher:
    """Executes list actions against the highlighted process."""

    def __init__(
        self,
        session: Session,
        registry: ProcessRegistry,
        killer: ProcessKiller,
        clipboard: Clipboard,
        sink: PresentationSink,
    ) -> None:
        self._session = session
        self._registry = registry
        self._killer = killer
        self._clipboard = clipboard
        self._sink = sink

    def dispatch(self, action_value: str) -> None:
        """
        Run the action named by ``action_value``.

        Unknown action values are ignored.
        """
        pid = self._session.highlighted_pid
        if pid is None:
            self._sink.notify("No process selected", severity="warning")
            return

        try:
            action = ProcessAction(action_value)
        except ValueError:
            logger.debug("Ignoring unknown action %r", action_value)
            return

        if action is ProcessAction.KILL:
            self._kill(pid)
        elif action is ProcessAction.COPY_EXE:
            self._copy_exe(pid)
        elif action is ProcessAction.COPY_PID:
            self._clipboard.write_text(str(pid))
            self._sink.notify(f"Copied PID {pid}")

    def _kill(self, pid: int) -> None:
        """Request termination and resume polling so the list catches up."""
        process = self._registry.lookup(pid)
        name = process.name if process is not None else str(pid)

        logger.info("Killing process %d (%s)", pid, name)
        self._killer.kill_pid(pid)
        self._session.unpin()
        self._sink.notify(f"Sent kill to {name}")

    def _copy_exe(self, pid: int) -> None:
        process = self._registry.lookup(pid)
        if process is None or not process.exe:
            self._sink.notify("No executable found for this process", severity="warning")
            return

        self._clipboard.write_text(process.exe)
        self._sink.notify(f"Copied {process.exe}")
