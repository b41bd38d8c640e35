"""Shared fakes for pyprocs tests."""

import pytest

from pyprocs.models import ProcessRecord, Session
from pyprocs.registry import ProcessRegistry


def make_record(
    pid: int,
    cpu_usage: float = 0.0,
    name: str | None = None,
    exe: str | None = "/usr/bin/test",
    memory: int = 1024000,
    virtual_memory: int = 4096000,
    parent: int | None = 1,
    group_id: int | None = 1000,
) -> ProcessRecord:
    """Build a ProcessRecord with sensible defaults."""
    return ProcessRecord(
        pid=pid,
        name=name if name is not None else f"proc{pid}",
        exe=exe,
        cpu_usage=cpu_usage,
        memory=memory,
        virtual_memory=virtual_memory,
        parent=parent,
        group_id=group_id,
    )


class FakeSource:
    """In-memory process table that records every call."""

    def __init__(self, processes=None):
        self.snapshots = [list(processes or [])]
        self.refresh_calls = 0
        self.killed: list[int] = []
        self.fail_next = False
        self.on_refresh = None

    def set_processes(self, processes) -> None:
        self.snapshots = [list(processes)]

    def refresh_processes(self) -> None:
        self.refresh_calls += 1
        if self.on_refresh is not None:
            self.on_refresh()
        if self.fail_next:
            self.fail_next = False
            raise OSError("process table unavailable")

    def processes(self):
        return list(self.snapshots[-1])

    def kill_pid(self, pid: int) -> None:
        self.killed.append(pid)


class FakeSink:
    """Presentation sink that keeps everything it is given."""

    def __init__(self):
        self.lists = []
        self.details = []
        self.placeholders = []
        self.notifications: list[tuple[str, str]] = []

    def render_list(self, items) -> None:
        self.lists.append(list(items))

    def render_detail(self, detail) -> None:
        self.details.append(detail)

    def set_search_placeholder(self, text: str) -> None:
        self.placeholders.append(text)

    def notify(self, message: str, *, severity: str = "information") -> None:
        self.notifications.append((message, severity))

    @property
    def warnings(self) -> list[str]:
        return [message for message, severity in self.notifications if severity == "warning"]

    @property
    def errors(self) -> list[str]:
        return [message for message, severity in self.notifications if severity == "error"]


class FakeClipboard:
    def __init__(self):
        self.writes: list[str] = []

    def write_text(self, text: str) -> None:
        self.writes.append(text)


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def registry() -> ProcessRegistry:
    return ProcessRegistry()


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource([make_record(1, cpu_usage=10.0), make_record(2, cpu_usage=50.0)])
