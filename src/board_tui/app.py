from __future__ import annotations

import logging
import queue
from typing import Any, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Header, Rule, Static

from .config import (
    CHANNEL_SIZE,
    HTTP_TIMEOUT,
    POLL_TIMEOUT,
    TICK_INTERVAL,
    UI_DEFAULTS,
    get_positive_float,
)
from .events import Action, Event, EventSource, QueueInput
from .fetcher import FetchGateway
from .navigation import Navigator, Snapshot, View
from .registry import BoardRegistry
from .widgets import BoardTable, RowTable, StatusBar

logger = logging.getLogger("board")


class BoardApp(App):
    TITLE = "Board"
    SUB_TITLE = "Discussion board reader"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q", "nav('quit')", "Quit"),
        Binding("h", "nav('switch_home')", "Home"),
        Binding("b", "nav('switch_boards')", "Boards"),
        Binding("up,k", "nav('move_up')", "Up", show=False),
        Binding("down,j", "nav('move_down')", "Down", show=False),
    ]

    def __init__(
        self,
        theme: Optional[str] = None,
        config: Optional[dict[str, Any]] = None,
        initial_board: Optional[str] = None,
        tick_interval: Optional[float] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self._theme_name = theme or "dracula"
        self.config = config or {}
        self.registry = BoardRegistry.from_config(self.config)
        self.gateway = FetchGateway(
            timeout=get_positive_float(self.config, "http_timeout", HTTP_TIMEOUT)
        )
        self.inputs = QueueInput()
        self.channel: "queue.Queue[Event]" = queue.Queue(maxsize=CHANNEL_SIZE)
        self.event_source = EventSource(
            self.inputs.poll,
            self.channel,
            tick_interval=tick_interval
            or get_positive_float(self.config, "tick_interval", TICK_INTERVAL),
            poll_timeout=POLL_TIMEOUT,
        )
        self.navigator = Navigator(
            self.registry,
            self.gateway,
            listener=self._publish_snapshot,
            initial_view=_initial_view(self.config.get("initial_view")),
            initial_board=self._initial_board_index(initial_board),
            refresh_on_tick=bool(self.config.get("refresh_on_tick", True)),
        )
        self._shown_rows: Optional[tuple] = None
        self._shown_error: Optional[str] = None

    def _initial_board_index(self, name: Optional[str]) -> int:
        if not name:
            return 0
        index = self.registry.index_of(name)
        if index is None:
            logger.warning("Unknown board %r, starting on %s", name, self.registry[0].name)
            return 0
        return index

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main"):
            with Vertical(id="left"):
                yield Static("Boards", classes="pane-title")
                yield BoardTable(id="boards-table")
            yield Rule(orientation="vertical")
            with Vertical(id="right"):
                yield Static("Posts", classes="pane-title", id="rows-title")
                yield RowTable(id="rows-table")
        yield StatusBar()

    def on_mount(self) -> None:
        if self._theme_name in self.available_themes:
            self.theme = self._theme_name
        else:
            logger.warning("Theme %r not available, keeping default", self._theme_name)

        self.query_one(BoardTable).show_boards(self.registry.boards)

        self.query_one(StatusBar).set_keybindings(
            self.keybindings_hint().format(color="$accent")
        )

        self.run_worker(self.event_source.run, name="event_source", thread=True)
        self.run_worker(self._navigate, name="navigator", thread=True)

    def keybindings_hint(self) -> str:
        default = UI_DEFAULTS["statusbar_keybindings"]
        ui = self.config.get("ui", {})
        if not isinstance(ui, dict):
            logger.warning("Ignoring invalid ui settings %r", ui)
            return default
        hint = ui.get("statusbar_keybindings", default)
        if not isinstance(hint, str):
            logger.warning("Ignoring invalid statusbar_keybindings %r", hint)
            return default
        return hint

    def on_unmount(self) -> None:
        self.event_source.stop()
        self.gateway.close()

    def action_nav(self, name: str) -> None:
        self.inputs.push(Action(name))

    def _navigate(self) -> None:
        self.navigator.run(self.channel, keep_running=lambda: not self.event_source.stopped)
        if not self.navigator.finished:
            # Nothing reads key input once the event source is gone.
            logger.warning("Event source stopped before quit, closing the app")
        try:
            self.call_from_thread(self.exit)
        except RuntimeError as e:
            logger.debug("App already closed: %s", e)

    def _publish_snapshot(self, snapshot: Snapshot) -> None:
        # Runs on the navigator thread.
        try:
            self.call_from_thread(self.render_snapshot, snapshot)
        except RuntimeError as e:
            logger.debug("Dropping snapshot, app not running: %s", e)

    def render_snapshot(self, snapshot: Snapshot) -> None:
        boards_table = self.query_one(BoardTable)
        rows_table = self.query_one(RowTable)
        boards_table.select(snapshot.selection.selected_board_index)

        if snapshot.rows != self._shown_rows:
            rows_table.show_rows(snapshot.rows)
            self._shown_rows = snapshot.rows
        rows_table.select(snapshot.selection.selected_row_index)

        self.query_one("#left").set_class(snapshot.view is View.BOARDS, "active")
        self.query_one("#right").set_class(snapshot.view is View.HOME, "active")

        if snapshot.rows_board_index is not None:
            board = snapshot.boards[snapshot.rows_board_index]
            self.sub_title = board.name
            self.query_one("#rows-title", Static).update(f"Posts: {board.name}")

        status = self.query_one(StatusBar)
        selected = snapshot.boards[snapshot.selection.selected_board_index]
        status.loading_status = f"Loading {selected.name}..." if snapshot.loading else ""
        status.error_status = snapshot.error or ""
        if snapshot.error and snapshot.error != self._shown_error:
            self.notify(f"Failed to load board: {snapshot.error}", severity="error")
        self._shown_error = snapshot.error


def _initial_view(value: Any) -> View:
    try:
        return View(value or View.HOME.value)
    except ValueError:
        logger.warning("Unknown initial_view %r, using home", value)
        return View.HOME
