"""Executable Textual app that highlights blank defects while editing."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use blank_engine.adapters.textual.app"
    ) from exc

from blank_engine.buffer import TextBuffer
from blank_engine.classify.models import Match
from blank_engine.config import EngineConfig
from blank_engine.engine import EngineRegistry
from blank_engine.runtime import telemetry

from .controller import TextualBlankAdapter, TextualUIHooks


@dataclass
class UIState:
    status_text: str = ""
    defects_text: str = ""


def _describe(text: str, matches: Sequence[Match], limit: int = 8) -> str:
    lines = []
    for match in matches[:limit]:
        row = text.count("\n", 0, match.start) + 1
        lines.append(f"{row}: {match.kind.value} [{match.start}, {match.end})")
    if len(matches) > limit:
        lines.append(f"... {len(matches) - limit} more")
    return "\n".join(lines)


class BlankEngineApp(App[None]):
    """Minimal Textual UI embedding the blank defect engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
	}

	#defects {
		height: 8;
		border: round $accent;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+k", "cleanup", "Clean blanks"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        path: Optional[Path] = None,
        config: Optional[EngineConfig] = None,
        mode_id: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self._mode_id = mode_id
        self._config = config or EngineConfig.from_env()
        self.adapter: TextualBlankAdapter | None = None
        self._editor: TextArea | None = None
        self._defects_widget: Static | None = None
        self._status_widget: Static | None = None
        self._logger = telemetry.get_logger("blank_engine.textual")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._editor = TextArea("", id="editor")
        yield self._editor
        self._defects_widget = Static("", id="defects")
        yield self._defects_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        text = ""
        if self._path is not None and self._path.exists():
            text = self._path.read_text(encoding="utf-8")
        buffer = TextBuffer(text, name=self._path.name if self._path else "scratch")
        hooks = TextualUIHooks(
            update_defects=self._update_defects,
            update_status=self._update_status,
            update_text=self._update_text,
            log=self._log_line,
        )
        if self._editor is not None:
            self._editor.load_text(text)
        self.adapter = TextualBlankAdapter(
            EngineRegistry(self._config),
            hooks,
            buffer=buffer,
            buffer_id=buffer.name,
            file_id=str(self._path) if self._path else None,
            mode_id=self._mode_id,
        )

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter:
            self.adapter.handle_text_change(event.text_area.text)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self.adapter:
            self.adapter.handle_cursor(event.selection.end)

    def action_cleanup(self) -> None:
        if self.adapter:
            self.adapter.clean()

    def _update_text(self, text: str) -> None:
        if self._editor is not None and self._editor.text != text:
            self._editor.load_text(text)

    def _update_defects(self, matches: Sequence[Match]) -> None:
        text = self.adapter.buffer.text if self.adapter else ""
        self._state.defects_text = _describe(text, matches)
        if self._defects_widget:
            self._defects_widget.update(self._state.defects_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _log_line(self, line: str) -> None:
        self._logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the blank engine Textual demo.")
    parser.add_argument("path", nargs="?", type=Path, help="File to open")
    parser.add_argument(
        "--mode",
        default=os.environ.get("BLANK_ENGINE_MODE"),
        help="Mode id used for per-mode style lookup",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        help="Telemetry preset to apply before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = BlankEngineApp(path=args.path, mode_id=args.mode)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
