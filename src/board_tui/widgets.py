from __future__ import annotations

from typing import Optional, Sequence

from rich.markup import escape
from rich.text import Text
from textual.reactive import reactive
from textual.widgets import DataTable, Static

from .datamodels import Board, Row

ROW_COLUMNS = ("Title", "Comments", "Author", "Views", "Time")


# --- UI Widgets ---
class BoardTable(DataTable):
    """Board list. Selection is driven by snapshots, not by focus."""

    can_focus = False

    def __init__(self, **kwargs) -> None:
        super().__init__(cursor_type="row", **kwargs)

    def show_boards(self, boards: Sequence[Board]) -> None:
        if not self.columns:
            self.add_column("Board", key="name")
        self.clear()
        for i, board in enumerate(boards):
            self.add_row(board.name, key=str(i))

    def select(self, index: Optional[int]) -> None:
        _move_cursor(self, index)


class RowTable(DataTable):
    can_focus = False

    def __init__(self, **kwargs) -> None:
        super().__init__(cursor_type="row", **kwargs)

    def show_rows(self, rows: Sequence[Row]) -> None:
        if not self.columns:
            for name in ROW_COLUMNS:
                self.add_column(name, key=name.lower())
        self.clear()
        for i, row in enumerate(rows):
            comments = Text(str(row.comment_count), style="bold" if row.comment_count else "dim")
            self.add_row(
                row.title,
                comments,
                row.author,
                Text(row.view_count, justify="right"),
                row.timestamp,
                key=str(i),
            )

    def select(self, index: Optional[int]) -> None:
        _move_cursor(self, index)


def _move_cursor(table: DataTable, index: Optional[int]) -> None:
    if index is None or not table.is_valid_row_index(index):
        table.show_cursor = False
        return
    table.show_cursor = True
    table.move_cursor(row=index)


class StatusBar(Static):
    loading_status = reactive("")
    error_status = reactive("")
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def update_display(self) -> None:
        """Update the status bar display."""
        status_items = []
        if self.loading_status:
            status_items.append(self.loading_status)

        if self.error_status:
            status_items.append(f"[b red]{escape(self.error_status)}[/]")

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)

        self.update(" | ".join(status_items))

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_error_status(self, error_status: str) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()
