# -*- coding: utf-8 -*-
from __future__ import annotations

from app.dirty_tracker import DirtyTracker


def test_dirty_tracker_marks_and_clears() -> None:
    tracker = DirtyTracker()
    assert tracker.is_dirty is False

    tracker.mark_dirty(reason="move", block_ids=[3, 4])
    assert tracker.is_dirty is True
    assert tracker.last_change_summary == "move | 3,4"

    tracker.clear_dirty()
    assert tracker.is_dirty is False
    assert tracker.last_change_summary == ""


def test_dirty_tracker_suspend_context() -> None:
    tracker = DirtyTracker()
    assert tracker.is_dirty is False

    with tracker.suspend_tracking():
        tracker.mark_dirty(reason="ignored")
        assert tracker.is_dirty is False

    tracker.mark_dirty(reason="applied")
    assert tracker.is_dirty is True


def test_dirty_tracker_nested_suspend() -> None:
    tracker = DirtyTracker()
    tracker.suspend()
    tracker.suspend()
    tracker.resume()
    tracker.mark_dirty(reason="still suspended")
    assert tracker.is_dirty is False
    tracker.resume()
    tracker.resume()  # extra resume is harmless
    tracker.mark_dirty(reason="live")
    assert tracker.is_dirty is True


def test_on_change_fires_only_on_flip() -> None:
    flips = []
    tracker = DirtyTracker(on_change=flips.append)
    tracker.mark_dirty("a")
    tracker.mark_dirty("b")
    tracker.clear_dirty()
    tracker.clear_dirty()
    assert flips == [True, False]
