# -*- coding: utf-8 -*-
from __future__ import annotations

from app.events import BlocksChanged, ConnectionsChanged, EventBus


def test_emit_reaches_subscribers_of_that_type_only() -> None:
    bus = EventBus()
    blocks, conns = [], []
    bus.subscribe(BlocksChanged, blocks.append)
    bus.subscribe(ConnectionsChanged, conns.append)

    bus.emit(BlocksChanged("added", (1,)))
    assert blocks == [BlocksChanged("added", (1,))]
    assert conns == []


def test_unsubscribe() -> None:
    bus = EventBus()
    seen = []
    bus.subscribe(BlocksChanged, seen.append)
    bus.unsubscribe(BlocksChanged, seen.append)
    bus.unsubscribe(BlocksChanged, seen.append)
    bus.emit(BlocksChanged("removed"))
    assert seen == []


def test_failing_subscriber_does_not_stop_the_others() -> None:
    bus = EventBus()
    seen = []

    def boom(_event) -> None:
        raise RuntimeError("handler bug")

    bus.subscribe(BlocksChanged, boom)
    bus.subscribe(BlocksChanged, seen.append)
    bus.emit(BlocksChanged("added"))
    assert len(seen) == 1
