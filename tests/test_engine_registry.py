from __future__ import annotations

import pytest

from blank_engine.buffer import TextBuffer
from blank_engine.classify import Match
from blank_engine.cleanup import Edit
from blank_engine.config import EngineConfig
from blank_engine.engine import BufferSource, EngineRegistry
from blank_engine.errors import OutOfRangeError, ReadOnlyError, UnknownBufferError
from blank_engine.style import ActionKind, DefectKind


def make_registry(**config: object) -> EngineRegistry:
    return EngineRegistry(EngineConfig(**config), logger_name="tests.engine")


def test_activation_resolves_style_from_file_id() -> None:
    registry = make_registry(per_file_styles={r"\.txt$": ["trailing"]})
    buffer = TextBuffer("  \tx  \n")

    engine = registry.activate("b", "a.txt", None, source=buffer)

    assert isinstance(buffer, BufferSource)
    assert engine.style.kinds == (DefectKind.TRAILING,)
    assert registry.query_defects("b") == [Match(DefectKind.TRAILING, 4, 6)]


def test_unknown_buffers_raise() -> None:
    registry = make_registry()

    with pytest.raises(UnknownBufferError):
        registry.on_edit("missing", (0, 0), 1)
    with pytest.raises(UnknownBufferError):
        registry.query_defects("missing")
    assert registry.deactivate("missing") is False


def test_reactivation_replaces_engine_and_markers() -> None:
    registry = make_registry()
    buffer = TextBuffer("\n\nX")
    first = registry.activate("b", None, None, source=buffer)
    first.query_defects()

    second = registry.activate("b", None, None, source=buffer)

    assert second is not first
    assert registry.get("b") is second
    assert second.tracker.bob.unknown
    assert len(registry) == 1 and "b" in registry


def test_deactivate_discards_engine() -> None:
    registry = make_registry()
    registry.activate("b", None, None, source=TextBuffer(""))

    assert registry.deactivate("b") is True
    with pytest.raises(UnknownBufferError):
        registry.clean("b")


def test_start_region_follows_cursor_notifications() -> None:
    registry = make_registry()
    registry.activate("b", None, None, source=TextBuffer("\n\n\nX"), cursor=0)

    assert registry.query_defects("b") == []

    registry.on_cursor_move("b", 3)

    assert registry.query_defects("b") == [Match(DefectKind.EMPTY_AT_START, 0, 3)]


def test_buffer_edits_reach_the_tracker() -> None:
    registry = make_registry(default_style="empty")
    buffer = TextBuffer("X\n")
    buffer.on_edit(lambda start, end, size: registry.on_edit("b", (start, end), size))
    registry.activate("b", None, None, source=buffer)
    assert registry.query_defects("b") == []

    buffer.insert_text("\n\n", offset=2)

    assert registry.query_defects("b") == [Match(DefectKind.EMPTY_AT_END, 2, 4)]


def test_clean_ignores_cursor_on_trailing_line() -> None:
    registry = make_registry()
    buffer = TextBuffer("foo   \n", cursor=5)
    registry.activate("b", None, None, source=buffer, cursor=5)

    assert registry.query_defects("b") == []
    edits = registry.clean("b")
    buffer.apply_edits(edits)

    assert edits == [Edit(3, 6)]
    assert buffer.text == "foo\n"


def test_cursor_shifted_by_cleanup_keeps_suppressing_its_line() -> None:
    registry = make_registry()
    buffer = TextBuffer("a  \nfoo   ", cursor=10)
    buffer.on_edit(lambda start, end, size: registry.on_edit("b", (start, end), size))
    buffer.on_cursor(lambda position: registry.on_cursor_move("b", position))
    registry.activate("b", None, None, source=buffer, cursor=10)
    assert registry.query_defects("b") == []

    edits = registry.clean("b", (0, 3))
    buffer.apply_edits(edits)

    assert edits == [Edit(1, 3)]
    assert buffer.cursor == 8
    assert registry.query_defects("b") == []


def test_clean_on_read_only_buffer_raises() -> None:
    registry = make_registry()
    registry.activate("b", None, None, source=TextBuffer("x  ", modifiable=False))

    with pytest.raises(ReadOnlyError):
        registry.clean("b")


def test_update_identity_recomputes_style() -> None:
    registry = make_registry(per_mode_styles={"python": ["indentation::space"]})
    engine = registry.activate("b", None, "text", source=TextBuffer(""), tab_width=4)

    style = registry.update_identity("b", file_id=None, mode_id="python")

    assert style.kinds == (DefectKind.INDENTATION_SPACE,)
    assert engine.style is style
    assert style.tab_width == 4


def test_report_counts_every_defect() -> None:
    registry = make_registry()
    registry.activate("b", None, None, source=TextBuffer("a  \nb \n"), cursor=2)

    report = registry.report("b")

    assert report.count(DefectKind.TRAILING) == 2
    assert report.count(DefectKind.INDENTATION) == 0
    assert report.bogus
    assert report.summary() == "trailing=2"


def test_save_policy_plans_cleanup_before_abort_check() -> None:
    registry = make_registry(default_actions=("cleanup-on-save", "abort-save-on-bogus"))
    registry.activate("b", None, None, source=TextBuffer("a  \n"))

    decision = registry.evaluate_save("b")

    assert decision.cleanup
    assert decision.edits == (Edit(1, 3),)
    assert decision.abort is False


def test_save_policy_aborts_on_bogus_buffer() -> None:
    registry = make_registry(default_actions=("abort-save-on-bogus",))
    registry.activate("b", None, None, source=TextBuffer("a  \n"))

    decision = registry.evaluate_save("b")

    assert decision.abort
    assert decision.report is not None and decision.report.bogus
    assert decision.edits == ()


def test_activation_policy_warns_on_read_only() -> None:
    registry = make_registry(
        default_actions=("cleanup-on-activate", "warn-on-readonly")
    )
    engine = registry.activate(
        "b", None, None, source=TextBuffer("a  \n", modifiable=False)
    )

    decision = registry.evaluate_activation("b")

    assert ActionKind.WARN_ON_READONLY in engine.actions
    assert not decision.cleanup
    assert len(decision.warnings) == 1


def test_activation_policy_reports_only_when_bogus() -> None:
    registry = make_registry(default_actions=("report-on-bogus-on-activate",))
    registry.activate("dirty", None, None, source=TextBuffer("a  \n"))
    registry.activate("clean", None, None, source=TextBuffer("a\n"))

    assert registry.evaluate_activation("dirty").report is not None
    assert registry.evaluate_activation("clean").report is None


def test_invalid_notifications_rejected() -> None:
    registry = make_registry()
    registry.activate("b", None, None, source=TextBuffer("abc"))

    with pytest.raises(OutOfRangeError):
        registry.on_edit("b", (2, 1), 0)
    with pytest.raises(OutOfRangeError):
        registry.on_cursor_move("b", -1)
