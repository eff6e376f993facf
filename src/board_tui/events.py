"""Input and timer events, merged into one ordered channel.

The producer side (``EventSource.run``) runs on its own thread. It polls
for key actions with a bounded wait and tracks elapsed time for ticks,
pushing both onto a ``queue.Queue`` drained by the navigation loop.
"""
from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .config import POLL_TIMEOUT, TICK_INTERVAL

logger = logging.getLogger("board")


class Action(Enum):
    QUIT = "quit"
    SWITCH_HOME = "switch_home"
    SWITCH_BOARDS = "switch_boards"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"


class EventKind(Enum):
    KEY = "key"
    TICK = "tick"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    action: Optional[Action] = None

    @classmethod
    def key(cls, action: Action) -> "Event":
        return cls(EventKind.KEY, action)


TICK = Event(EventKind.TICK)


class QueueInput:
    """Thread-safe mailbox the UI pushes key actions into."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[Action]" = queue.Queue()

    def push(self, action: Action) -> None:
        self._queue.put(action)

    def poll(self, timeout: float) -> Optional[Action]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None


class EventSource:
    def __init__(
        self,
        poll: Callable[[float], Optional[Action]],
        channel: "queue.Queue[Event]",
        tick_interval: float = TICK_INTERVAL,
        poll_timeout: float = POLL_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._poll = poll
        self.channel = channel
        self.tick_interval = tick_interval
        self.poll_timeout = poll_timeout
        self._clock = clock
        self._stopped = threading.Event()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def stop(self) -> None:
        self._stopped.set()

    def run(self) -> None:
        logger.debug("Event source started (tick every %ss)", self.tick_interval)
        next_tick = self._clock() + self.tick_interval
        while not self._stopped.is_set():
            wait = min(self.poll_timeout, max(0.0, next_tick - self._clock()))
            action = self._poll(wait)
            if action is not None:
                if not self._emit(Event.key(action)):
                    break
                if action is Action.QUIT:
                    self.stop()
                    break
            now = self._clock()
            if now >= next_tick:
                # One tick however late we are; the timer re-arms from now.
                if not self._emit(TICK):
                    break
                next_tick = now + self.tick_interval
        logger.debug("Event source stopped")

    def _emit(self, event: Event) -> bool:
        if self._stopped.is_set():
            return False
        try:
            self.channel.put_nowait(event)
        except queue.Full:
            logger.error("Event channel full, stopping event source (dropped %s)", event)
            self.stop()
            return False
        return True
