from __future__ import annotations

import queue
import threading

from board_tui.events import TICK, Action, Event, EventKind, EventSource, QueueInput


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def scripted_poll(clock, script):
    """Poll that replays ``script`` as (seconds_elapsed, action) steps."""
    steps = iter(script)
    waits = []

    def poll(timeout):
        waits.append(timeout)
        elapsed, action = next(steps)
        clock.now += elapsed
        return action

    return poll, waits


def drain(channel):
    events = []
    while True:
        try:
            events.append(channel.get_nowait())
        except queue.Empty:
            return events


def test_keys_are_delivered_in_order_and_quit_ends_loop():
    clock = FakeClock()
    poll, _ = scripted_poll(
        clock,
        [(0.1, Action.MOVE_DOWN), (0.1, None), (0.1, Action.MOVE_UP), (0.1, Action.QUIT)],
    )
    channel = queue.Queue()
    source = EventSource(poll, channel, tick_interval=10, poll_timeout=0.25, clock=clock)
    source.run()

    assert drain(channel) == [
        Event.key(Action.MOVE_DOWN),
        Event.key(Action.MOVE_UP),
        Event.key(Action.QUIT),
    ]
    assert source.stopped


def test_tick_fires_when_due_and_rearms():
    clock = FakeClock()
    poll, _ = scripted_poll(
        clock,
        [
            (0.5, None),
            (0.75, None),
            (0.5, Action.MOVE_DOWN),
            (0.5, None),
            (0.125, Action.QUIT),
        ],
    )
    channel = queue.Queue()
    EventSource(poll, channel, tick_interval=1.0, poll_timeout=1.0, clock=clock).run()

    kinds = [e.kind for e in drain(channel)]
    # ticks at t=1.25 and t=2.25, the key at t=1.75, quit at t=2.375
    assert kinds == [
        EventKind.TICK,
        EventKind.KEY,
        EventKind.TICK,
        EventKind.KEY,
    ]


def test_late_ticks_are_coalesced():
    clock = FakeClock()
    poll, _ = scripted_poll(clock, [(35.0, None), (0.0, Action.QUIT)])
    channel = queue.Queue()
    EventSource(poll, channel, tick_interval=10, poll_timeout=1.0, clock=clock).run()

    assert drain(channel) == [TICK, Event.key(Action.QUIT)]


def test_poll_wait_is_bounded():
    clock = FakeClock()
    poll, waits = scripted_poll(clock, [(0.0, None), (0.0, Action.QUIT)])
    EventSource(
        poll, queue.Queue(), tick_interval=10, poll_timeout=0.25, clock=clock
    ).run()
    assert waits == [0.25, 0.25]


def test_poll_wait_shrinks_before_tick():
    clock = FakeClock()
    poll, waits = scripted_poll(clock, [(9.9, None), (0.0, Action.QUIT)])
    EventSource(
        poll, queue.Queue(), tick_interval=10, poll_timeout=0.25, clock=clock
    ).run()
    assert waits[0] == 0.25
    assert abs(waits[1] - 0.1) < 1e-9


def test_full_channel_stops_producer():
    clock = FakeClock()
    poll, waits = scripted_poll(
        clock, [(0.0, Action.MOVE_DOWN), (0.0, Action.MOVE_DOWN), (0.0, Action.MOVE_UP)]
    )
    channel = queue.Queue(maxsize=1)
    source = EventSource(poll, channel, tick_interval=10, clock=clock)
    source.run()

    assert source.stopped
    assert len(waits) == 2
    assert drain(channel) == [Event.key(Action.MOVE_DOWN)]


def test_stop_ends_loop_from_another_thread():
    inputs = QueueInput()
    channel = queue.Queue()
    source = EventSource(inputs.poll, channel, tick_interval=60, poll_timeout=0.01)
    worker = threading.Thread(target=source.run)
    worker.start()
    inputs.push(Action.SWITCH_BOARDS)
    source.stop()
    worker.join(timeout=2)
    assert not worker.is_alive()


def test_queue_input_poll_times_out():
    inputs = QueueInput()
    assert inputs.poll(0.01) is None
    inputs.push(Action.SWITCH_HOME)
    assert inputs.poll(0.01) is Action.SWITCH_HOME
