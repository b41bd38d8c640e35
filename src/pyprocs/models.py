"""Data models for pyprocs."""

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable snapshot of a single process."""

    pid: int
    name: str
    exe: str | None
    cpu_usage: float  # 0.0 - 100.0 * core_count
    memory: int  # Bytes (resident)
    virtual_memory: int  # Bytes
    parent: int | None
    group_id: int | None


@dataclass(slots=True)
class Session:
    """
    Shared view state for one running monitor.

    ``refresh_lock`` suspends polling. It is set while a process is pinned
    and cleared again by unpinning or by a kill.
    """

    highlighted_pid: int | None = None
    pinned: bool = False
    refresh_lock: bool = False

    def pin(self) -> None:
        """Freeze the view on the highlighted process."""
        self.pinned = True
        self.refresh_lock = True

    def unpin(self) -> None:
        """Return to the live, auto-refreshing list."""
        self.pinned = False
        self.refresh_lock = False


class ProcessAction(str, Enum):
    """Actions offered on every process in the list."""

    KILL = "kill"
    COPY_EXE = "copy-exe"
    COPY_PID = "copy-pid"

    @property
    def title(self) -> str:
        """Human readable label."""
        return _ACTION_TITLES[self]


_ACTION_TITLES = {
    ProcessAction.KILL: "Kill",
    ProcessAction.COPY_EXE: "Copy Executable",
    ProcessAction.COPY_PID: "Copy PID",
}
