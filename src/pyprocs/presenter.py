"""Turns process snapshots into list and detail descriptions."""

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Literal, Protocol

from pyprocs.models import ProcessAction, ProcessRecord

SEARCH_PLACEHOLDER = "Search by process name or pid"

Severity = Literal["information", "warning", "error"]

_BYTE_UNITS = ["B", "kB", "MB", "GB", "TB", "PB"]


@dataclass(slots=True, frozen=True)
class ListItem:
    """One row of the process list."""

    title: str
    subtitle: str
    value: str  # JSON {"pid": ..., "name": ...}
    actions: tuple[ProcessAction, ...]
    accessories: tuple[str, ...]  # (cpu, memory)


@dataclass(slots=True, frozen=True)
class ProcessDetail:
    """Detail pane for a pinned process."""

    pid: int
    labels: tuple[tuple[str, str], ...]
    markdown: str


class PresentationSink(Protocol):
    """Where list, detail and toast output goes."""

    def render_list(self, items: Sequence[ListItem]) -> None: ...

    def render_detail(self, detail: ProcessDetail) -> None: ...

    def set_search_placeholder(self, text: str) -> None: ...

    def notify(self, message: str, *, severity: Severity = "information") -> None: ...


class Clipboard(Protocol):
    """System clipboard."""

    def write_text(self, text: str) -> None: ...


def format_bytes(size: int) -> str:
    """
    Format bytes as a human-readable string.

    Uses binary magnitudes with three significant digits, e.g. ``1.05 MB``,
    ``12.3 MB``, ``123 MB``.
    """
    size = max(0, size)
    if size < 1024:
        return f"{size} B"

    value = float(size)
    index = 0
    # Compare the rounded value so 1023.9 kB is shown as 1 MB, not 1024 kB
    while round(value) >= 1024 and index < len(_BYTE_UNITS) - 1:
        value /= 1024
        index += 1

    text = f"{value:.0f}" if value >= 100 else f"{value:.3g}"
    return f"{text} {_BYTE_UNITS[index]}"


def format_cpu(cpu_usage: float) -> str:
    """Format a CPU percentage with two decimals."""
    return f"{cpu_usage:.2f}%"


def rank_processes(records: Iterable[ProcessRecord]) -> list[ProcessRecord]:
    """Order by CPU usage, highest first, then by pid."""
    return sorted(records, key=lambda p: (-p.cpu_usage, p.pid))


def encode_item_value(pid: int, name: str) -> str:
    """Encode the value a list item carries through the UI layer."""
    return json.dumps({"pid": pid, "name": name})


def decode_item_value(value: str) -> tuple[int, str]:
    """Decode a list item value back into ``(pid, name)``."""
    data = json.loads(value)
    return int(data["pid"]), data["name"]


def present(snapshot: Iterable[ProcessRecord]) -> list[ListItem]:
    """Build the ranked list items for a snapshot."""
    return [
        ListItem(
            title=proc.name,
            subtitle=f"pid: {proc.pid}",
            value=encode_item_value(proc.pid, proc.name),
            actions=tuple(ProcessAction),
            accessories=(format_cpu(proc.cpu_usage), format_bytes(proc.memory)),
        )
        for proc in rank_processes(snapshot)
    ]


def filter_items(items: Iterable[ListItem], query: str) -> list[ListItem]:
    """Keep the items whose name or pid contains ``query`` (case-insensitive)."""
    needle = query.strip().lower()
    if not needle:
        return list(items)

    matches = []
    for item in items:
        pid, name = decode_item_value(item.value)
        if needle in name.lower() or needle in str(pid):
            matches.append(item)
    return matches


def describe_process(proc: ProcessRecord) -> ProcessDetail:
    """Build the detail pane for a single process."""
    labels = (
        ("Name", proc.name),
        ("PID", str(proc.pid)),
        ("CPU Usage", format_cpu(proc.cpu_usage)),
        ("Memory Usage", format_bytes(proc.memory)),
        ("Parent", str(proc.parent) if proc.parent is not None else "Unknown"),
        ("Group", str(proc.group_id) if proc.group_id is not None else "Unknown"),
    )
    markdown = (
        f"- **exe:** {proc.exe or 'Unknown'}\n"
        f"- **Virtual Memory:** {format_bytes(proc.virtual_memory)}\n"
    )
    return ProcessDetail(pid=proc.pid, labels=labels, markdown=markdown)
