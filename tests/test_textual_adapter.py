from __future__ import annotations

from typing import List, Sequence

from blank_engine.adapters.textual import TextualBlankAdapter, TextualUIHooks
from blank_engine.buffer import TextBuffer
from blank_engine.classify import Match
from blank_engine.config import EngineConfig
from blank_engine.engine import EngineRegistry
from blank_engine.style import DefectKind


class Recorder:
    def __init__(self) -> None:
        self.defects: List[Sequence[Match]] = []
        self.statuses: List[str] = []
        self.texts: List[str] = []
        self.logs: List[str] = []

    def hooks(self) -> TextualUIHooks:
        return TextualUIHooks(
            update_defects=self.defects.append,
            update_status=self.statuses.append,
            update_text=self.texts.append,
            log=self.logs.append,
        )


def make_adapter(
    text: str, *, modifiable: bool = True
) -> tuple[TextualBlankAdapter, Recorder]:
    recorder = Recorder()
    engines = EngineRegistry(EngineConfig(default_style="trailing"))
    buffer = TextBuffer(text, modifiable=modifiable)
    adapter = TextualBlankAdapter(engines, recorder.hooks(), buffer=buffer)
    return adapter, recorder


def test_adapter_reports_initial_defects() -> None:
    adapter, recorder = make_adapter("foo  \n")

    assert recorder.defects[-1] == [Match(DefectKind.TRAILING, 3, 5)]
    assert recorder.statuses[-1] == "blanks: trailing=1"
    assert "main" in adapter.engines


def test_text_change_becomes_minimal_edit() -> None:
    adapter, recorder = make_adapter("foo  \n")

    assert adapter.handle_text_change("foo  \nbar \n") is True
    assert adapter.handle_text_change("foo  \nbar \n") is False
    assert adapter.buffer.text == "foo  \nbar \n"
    assert recorder.defects[-1] == [
        Match(DefectKind.TRAILING, 3, 5),
        Match(DefectKind.TRAILING, 9, 10),
    ]
    assert any(line.startswith("edit -> ") for line in recorder.logs)


def test_cursor_hides_trailing_under_it() -> None:
    adapter, recorder = make_adapter("foo  \n")

    adapter.handle_cursor((0, 4))

    assert adapter.buffer.cursor == 4
    assert recorder.defects[-1] == []


def test_clean_pushes_text_back() -> None:
    adapter, recorder = make_adapter("foo  \nbar\t\n")

    edits = adapter.clean()

    assert len(edits) == 2
    assert adapter.buffer.text == "foo\nbar\n"
    assert recorder.texts == ["foo\nbar\n"]
    assert recorder.statuses[-1] == "blanks: clean"


def test_clean_skips_read_only_buffer() -> None:
    adapter, recorder = make_adapter("foo  \n", modifiable=False)

    assert adapter.clean() == []
    assert recorder.statuses[-1] == "read-only: nothing cleaned"
