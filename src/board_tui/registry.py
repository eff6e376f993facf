from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from .config import DEFAULT_BOARDS, ORIGIN
from .datamodels import Board

logger = logging.getLogger("board")


class BoardRegistry:
    """Read-only, ordered catalog of the boards the app can show."""

    def __init__(self, boards: Iterable[Board], origin: str = ORIGIN):
        self._boards: Tuple[Board, ...] = tuple(boards)
        if not self._boards:
            raise ValueError("A board registry needs at least one board")
        self.origin = origin.rstrip("/")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "BoardRegistry":
        origin = config.get("origin") or ORIGIN
        boards = _boards_from_definitions(config.get("boards") or [])
        if not boards:
            boards = _boards_from_definitions(DEFAULT_BOARDS)
        return cls(boards, origin=origin)

    @property
    def boards(self) -> Tuple[Board, ...]:
        return self._boards

    def __len__(self) -> int:
        return len(self._boards)

    def __getitem__(self, index: int) -> Board:
        return self._boards[index]

    def __iter__(self) -> Iterator[Board]:
        return iter(self._boards)

    def index_of(self, name: str) -> Optional[int]:
        for i, board in enumerate(self._boards):
            if board.name == name:
                return i
        return None

    def url_for(self, index: int) -> str:
        """Return the fully-qualified listing URL of the board at ``index``."""
        return f"{self.origin}{self._boards[index].uri}"


def _boards_from_definitions(definitions: Iterable[Any]) -> list[Board]:
    boards = []
    for definition in definitions:
        try:
            name = definition["name"].strip()
            uri = definition["uri"].strip()
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring invalid board definition %r: %s", definition, e)
            continue
        if not name or not uri:
            logger.warning("Ignoring board definition with empty fields: %r", definition)
            continue
        if not uri.startswith("/"):
            uri = "/" + uri
        boards.append(Board(name=name, uri=uri))
    return boards
