from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


# --- Data models ---
@dataclass(frozen=True)
class Board:
    name: str
    uri: str


@dataclass(frozen=True)
class Row:
    title: str
    url: str
    comment_count: int
    author: str
    view_count: str
    timestamp: str


@dataclass(frozen=True)
class SelectionState:
    selected_board_index: int = 0
    selected_row_index: Optional[int] = None
