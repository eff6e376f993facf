from __future__ import annotations

import logging
import queue
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple

from .datamodels import Board, Row, SelectionState
from .events import Action, Event, EventKind
from .extractor import extract
from .fetcher import FetchError
from .registry import BoardRegistry

logger = logging.getLogger("board")


class View(Enum):
    BOARDS = "boards"
    HOME = "home"


class Gateway(Protocol):
    def request(self, method: str, url: str) -> str: ...


@dataclass(frozen=True)
class Snapshot:
    """Everything the UI needs to draw one frame."""

    view: View
    selection: SelectionState
    boards: Tuple[Board, ...]
    rows: Tuple[Row, ...]
    rows_board_index: Optional[int]
    loading: bool = False
    error: Optional[str] = None


def step_index(current: Optional[int], length: int, delta: int) -> Optional[int]:
    """Move ``current`` by ``delta`` over ``length`` items, wrapping at both ends."""
    if length <= 0:
        return None
    if current is None:
        return 0
    return (min(current, length - 1) + delta) % length


def clamp_index(current: Optional[int], length: int) -> Optional[int]:
    if current is None or length <= 0:
        return None
    return max(0, min(current, length - 1))


class Navigator:
    """Owns selection state and decides when a board has to be (re)fetched.

    All state lives on the thread that calls ``handle``; the outside world
    only ever sees immutable ``Snapshot`` values passed to ``listener``.
    """

    def __init__(
        self,
        registry: BoardRegistry,
        gateway: Gateway,
        listener: Optional[Callable[[Snapshot], None]] = None,
        initial_view: View = View.HOME,
        initial_board: int = 0,
        refresh_on_tick: bool = True,
    ):
        self.registry = registry
        self.gateway = gateway
        self.listener = listener
        self.initial_view = initial_view
        self.refresh_on_tick = refresh_on_tick
        self.view = View.BOARDS
        self.selection = SelectionState(
            selected_board_index=clamp_index(initial_board, len(registry)) or 0
        )
        self.rows: List[Row] = []
        self.rows_board_index: Optional[int] = None
        self.loading = False
        self.error: Optional[str] = None
        self.finished = False
        self.fetch_count = 0

    def snapshot(self) -> Snapshot:
        return Snapshot(
            view=self.view,
            selection=self.selection,
            boards=self.registry.boards,
            rows=tuple(self.rows),
            rows_board_index=self.rows_board_index,
            loading=self.loading,
            error=self.error,
        )

    def start(self) -> None:
        """Enter the initial view, loading its rows when it shows a board."""
        if self.initial_view is View.HOME:
            self._enter_home()
        self._publish()

    def handle(self, event: Event) -> None:
        if self.finished:
            return
        if event.kind is EventKind.TICK:
            self._on_tick()
        elif event.action is not None:
            self._on_action(event.action)
        self._publish()

    def run(
        self,
        channel: "queue.Queue[Event]",
        keep_running: Callable[[], bool] = lambda: True,
        poll_timeout: float = 0.5,
    ) -> None:
        """Drain ``channel`` until quit, or until it is empty and the producer is gone."""
        self.start()
        while not self.finished:
            try:
                event = channel.get(timeout=poll_timeout)
            except queue.Empty:
                if not keep_running():
                    logger.debug("Event producer gone, leaving navigation loop")
                    break
                continue
            self.handle(event)
        logger.debug("Navigation loop finished")

    def _on_action(self, action: Action) -> None:
        logger.debug("Action %s in view %s", action.value, self.view.value)
        if action is Action.QUIT:
            self.finished = True
        elif action is Action.SWITCH_BOARDS:
            self.view = View.BOARDS
        elif action is Action.SWITCH_HOME:
            if self.view is not View.HOME:
                self._enter_home()
        elif action is Action.MOVE_DOWN:
            self._move(1)
        elif action is Action.MOVE_UP:
            self._move(-1)

    def _on_tick(self) -> None:
        if self.view is View.HOME and self.refresh_on_tick:
            logger.debug("Tick: refreshing board %d", self.selection.selected_board_index)
            self._load(self.selection.selected_board_index, reset_selection=False)

    def _enter_home(self) -> None:
        self.view = View.HOME
        self._load(self.selection.selected_board_index, reset_selection=True)

    def _move(self, delta: int) -> None:
        if self.view is View.BOARDS:
            current = self.selection.selected_board_index
            index = step_index(current, len(self.registry), delta)
            if index is None or index == current:
                return
            self.selection = replace(self.selection, selected_board_index=index)
            self._load(index, reset_selection=True)
        else:
            index = step_index(self.selection.selected_row_index, len(self.rows), delta)
            self.selection = replace(self.selection, selected_row_index=index)

    def _load(self, board_index: int, reset_selection: bool) -> None:
        url = self.registry.url_for(board_index)
        self.loading = True
        self._publish()
        self.fetch_count += 1
        try:
            markup = self.gateway.request("GET", url)
        except FetchError as e:
            logger.warning("Keeping previous rows, fetch failed: %s", e)
            self.error = str(e)
            return
        finally:
            self.loading = False
        rows = extract(markup)
        if reset_selection or board_index != self.rows_board_index:
            row_index = None
        else:
            row_index = clamp_index(self.selection.selected_row_index, len(rows))
        self.rows = rows
        self.rows_board_index = board_index
        self.selection = replace(self.selection, selected_row_index=row_index)
        self.error = None
        logger.info(
            "Loaded %d rows from %s", len(rows), self.registry[board_index].name
        )

    def _publish(self) -> None:
        if self.listener is not None:
            self.listener(self.snapshot())
