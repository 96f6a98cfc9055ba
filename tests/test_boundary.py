from __future__ import annotations

import pytest

from blank_engine.classify import BoundaryTracker, Match, find_empty_at_end
from blank_engine.style import DefectKind


def make_tracker(cursor: int | None = None) -> BoundaryTracker:
    return BoundaryTracker(cursor=cursor, logger_name="tests.boundary")


def test_start_region_reappears_after_cursor_leaves() -> None:
    text = "\n\n\nX"
    tracker = make_tracker(cursor=0)

    assert tracker.query_start(text, (0, len(text))) is None
    assert tracker.bob.clamped and tracker.bob.position == 0

    tracker.notify_cursor(3)

    assert tracker.bob.unknown
    assert tracker.query_start(text, (0, len(text))) == Match(
        DefectKind.EMPTY_AT_START, 0, 3
    )
    assert tracker.bob.position == 3


def test_start_query_past_marker_is_rejected_cheaply() -> None:
    tracker = make_tracker()
    tracker.query_start("\n\nX", (0, 3))

    # the marker says the region ends at 2, so a later span is not rescanned
    assert tracker.query_start("\n\n\n\nY", (3, 5)) is None


def test_edit_before_guard_invalidates_start_marker() -> None:
    text = "\n\nX\nmore\n"
    tracker = make_tracker()
    tracker.query_start(text, (0, len(text)))
    assert (tracker.bob.position, tracker.bob.guard) == (2, 3)

    tracker.notify_edit(5, 6, 1)
    assert tracker.bob.position == 2

    tracker.notify_edit(3, 3, 1)
    assert tracker.bob.unknown


def test_end_marker_shifts_with_earlier_edits() -> None:
    text = "X\nY\n\n\n"
    tracker = make_tracker()

    assert tracker.query_end(text, (0, len(text))) == Match(
        DefectKind.EMPTY_AT_END, 4, 6
    )
    assert (tracker.eob.position, tracker.eob.guard) == (4, 2)

    tracker.notify_edit(0, 0, 2)
    assert (tracker.eob.position, tracker.eob.guard) == (6, 4)

    tracker.notify_edit(4, 5, 0)
    assert tracker.eob.unknown


def test_end_region_hidden_while_cursor_at_buffer_end() -> None:
    text = "X\nY\n\n\n"
    tracker = make_tracker(cursor=len(text))

    assert tracker.query_end(text, (0, len(text))) is None
    assert tracker.eob.clamped

    tracker.notify_cursor(0)

    assert tracker.query_end(text, (0, len(text))) == Match(
        DefectKind.EMPTY_AT_END, 4, 6
    )


def test_query_dispatch_and_reset() -> None:
    tracker = make_tracker()
    tracker.query(" \nX", (0, 3), DefectKind.EMPTY_AT_START)

    with pytest.raises(ValueError):
        tracker.query("x", (0, 1), DefectKind.TRAILING)

    tracker.reset()
    assert tracker.bob.unknown and tracker.eob.unknown


def test_find_empty_at_end_requires_line_start() -> None:
    assert find_empty_at_end("foo  ") is None
    assert find_empty_at_end("foo\n  \n") == (4, 7)
    assert find_empty_at_end(" \n\t") == (0, 3)
