"""pyprocs - Main Textual application."""

import logging
from collections.abc import Sequence

from rich.markup import escape
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.logging import TextualHandler
from textual.widgets import DataTable, Footer, Input, Markdown, Static

from pyprocs.actions import ActionDispatcher
from pyprocs.models import ProcessAction, ProcessRecord, Session
from pyprocs.monitor import ProcessSource
from pyprocs.presenter import (
    SEARCH_PLACEHOLDER,
    ListItem,
    ProcessDetail,
    decode_item_value,
    filter_items,
    present,
)
from pyprocs.registry import ProcessRegistry
from pyprocs.scheduler import DEFAULT_INTERVAL, RefreshScheduler, SnapshotSource
from pyprocs.selection import SelectionController

logger = logging.getLogger(__name__)


class ProcessList(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessList {
        height: 1fr;
        border: solid $primary;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the process list."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"

        table.add_column("Name", key="name")
        table.add_column("PID", key="pid", width=10)
        table.add_column("CPU", key="cpu", width=9)
        table.add_column("Memory", key="mem", width=10)

    def update_items(
        self, items: Sequence[ListItem], keep_pid: int | None = None
    ) -> int | None:
        """
        Replace the rows with ``items``.

        The order changes on every refresh, so the table is rebuilt rather
        than patched. The cursor follows ``keep_pid`` if it is still listed.

        Returns:
            The pid under the cursor, or None if the table is empty.
        """
        table = self.query_one("#process-table", DataTable)
        table.clear()

        if not items:
            return None

        cursor_row = 0
        pids = []
        for index, item in enumerate(items):
            pid, _ = decode_item_value(item.value)
            cpu, memory = item.accessories
            table.add_row(Text(item.title), item.subtitle, cpu, memory, key=item.value)
            pids.append(pid)
            if pid == keep_pid:
                cursor_row = index

        table.move_cursor(row=cursor_row)
        return pids[cursor_row]


class DetailPane(Container):
    """Pinned process details."""

    DEFAULT_CSS = """
    DetailPane {
        width: 50%;
        border: solid $accent;
        padding: 0 1;
        display: none;
    }

    #detail-labels {
        height: auto;
        margin-bottom: 1;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the detail layout."""
        yield Static(id="detail-labels")
        yield Markdown(id="detail-body")

    def show_detail(self, detail: ProcessDetail) -> None:
        """Fill the pane from ``detail`` and make it visible."""
        width = max(len(title) for title, _ in detail.labels)
        lines = [f"[b]{title:<{width}}[/b]  {escape(text)}" for title, text in detail.labels]
        self.query_one("#detail-labels", Static).update("\n".join(lines))
        self.query_one("#detail-body", Markdown).update(detail.markdown)
        self.display = True


class PyprocsApp(App):
    """Main pyprocs application."""

    TITLE = "pyprocs"
    SUB_TITLE = "Live Process Monitor"
    AUTO_FOCUS = "#process-table"

    CSS = """
    Screen {
        layout: vertical;
    }

    #search {
        dock: top;
    }

    #body {
        layout: horizontal;
        height: 1fr;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("k", "kill", ProcessAction.KILL.title),
        ("e", "copy_exe", ProcessAction.COPY_EXE.title),
        ("p", "copy_pid", ProcessAction.COPY_PID.title),
        ("slash", "search", "Search"),
        ("escape", "focus_list", "List"),
    ]

    def __init__(
        self,
        source: ProcessSource | SnapshotSource | None = None,
        refresh_interval: float = DEFAULT_INTERVAL,
    ) -> None:
        """
        Initialize the PyprocsApp.

        Args:
            source: Process table collaborator. Defaults to a psutil source.
                Must also provide ``kill_pid``.
            refresh_interval: Seconds between refreshes. Default 5.0s.
        """
        super().__init__()
        self._source = source if source is not None else ProcessSource()
        self._session = Session()
        self._process_registry = ProcessRegistry()
        self._items: list[ListItem] = []
        self._query = ""
        self._scheduler = RefreshScheduler(
            self._source,
            self._process_registry,
            self._session,
            interval=refresh_interval,
            on_refresh=self._on_refresh,
            on_error=self._on_refresh_error,
        )
        self._selection = SelectionController(self._session, self._process_registry, self)
        self._actions = ActionDispatcher(
            self._session, self._process_registry, self._source, self, self
        )

    @property
    def session(self) -> Session:
        """Shared view state."""
        return self._session

    @property
    def registry(self) -> ProcessRegistry:
        """Current process snapshot."""
        return self._process_registry

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Input(id="search")
        with Container(id="body"):
            yield ProcessList()
            yield DetailPane()
        yield Footer()

    def on_mount(self) -> None:
        """Start refreshing once the widgets exist."""
        self.render_list([])
        self.set_search_placeholder(SEARCH_PLACEHOLDER)
        self._scheduler.start()

    # Presentation sink

    def render_list(self, items: Sequence[ListItem]) -> None:
        """Show the live list, hiding any detail."""
        self._items = list(items)
        self.query_one(DetailPane).display = False
        self._show_items()

    def render_detail(self, detail: ProcessDetail) -> None:
        """Show the detail pane beside the list."""
        self.query_one(DetailPane).show_detail(detail)

    def set_search_placeholder(self, text: str) -> None:
        self.query_one("#search", Input).placeholder = text

    # Clipboard

    def write_text(self, text: str) -> None:
        self.copy_to_clipboard(text)

    def _show_items(self) -> None:
        highlighted = self.query_one(ProcessList).update_items(
            filter_items(self._items, self._query),
            keep_pid=self._session.highlighted_pid,
        )
        self._selection.on_highlight(highlighted)

    def _on_refresh(self, snapshot: tuple[ProcessRecord, ...]) -> None:
        logger.debug("Refreshed %d processes", len(snapshot))
        gone = self._session.highlighted_pid
        if gone is not None and self._process_registry.lookup(gone) is None:
            # The cursor falls back to another row; make sure the operator sees it
            self.notify(f"Process {gone} is no longer running", severity="warning")
        self.render_list(present(snapshot))

    def _on_refresh_error(self, exc: OSError) -> None:
        self.notify(str(exc), severity="error")

    # Events

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        """Track the highlighted process."""
        if event.row_key.value is None:
            return
        pid, _ = decode_item_value(event.row_key.value)
        self._selection.on_highlight(pid)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter pins or unpins the selected process."""
        if event.row_key.value is None:
            return
        pid, _ = decode_item_value(event.row_key.value)
        self._selection.on_select(pid)

    def on_input_changed(self, event: Input.Changed) -> None:
        """Filter the list as the search text changes."""
        self._query = event.value
        self._show_items()

    # Actions

    def action_kill(self) -> None:
        self._actions.dispatch(ProcessAction.KILL.value)
        # A kill unpins; drop the stale detail until the next refresh redraws
        self.query_one(DetailPane).display = self._session.pinned

    def action_copy_exe(self) -> None:
        self._actions.dispatch(ProcessAction.COPY_EXE.value)

    def action_copy_pid(self) -> None:
        self._actions.dispatch(ProcessAction.COPY_PID.value)

    def action_search(self) -> None:
        """Focus the search bar."""
        self.query_one("#search", Input).focus()

    def action_focus_list(self) -> None:
        self.query_one("#process-table", DataTable).focus()

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._scheduler.stop()
        self.exit()


def main() -> None:
    """Entry point for pyprocs application."""
    logging.basicConfig(level=logging.INFO, handlers=[TextualHandler()])
    app = PyprocsApp()
    app.run()


if __name__ == "__main__":
    main()
