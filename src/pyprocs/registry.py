"""Holds the most recently installed process snapshot."""

from collections.abc import Iterable

from pyprocs.models import ProcessRecord


class ProcessRegistry:
    """
    Store for the current snapshot.

    The snapshot is kept as a tuple and swapped by a single reference
    assignment, so readers always see either the old or the new snapshot
    in full.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._snapshot: tuple[ProcessRecord, ...] = ()

    @property
    def snapshot(self) -> tuple[ProcessRecord, ...]:
        """Get the current snapshot."""
        return self._snapshot

    def replace(self, snapshot: Iterable[ProcessRecord]) -> None:
        """Install ``snapshot``, discarding the previous one."""
        self._snapshot = tuple(snapshot)

    def lookup(self, pid: int) -> ProcessRecord | None:
        """Return the record for ``pid``, or None if it is not in the snapshot."""
        for record in self._snapshot:
            if record.pid == pid:
                return record
        return None

    def __len__(self) -> int:
        return len(self._snapshot)
