"""Adapter that wires a TextBuffer and an EngineRegistry into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Hashable, List, Optional, Sequence

from blank_engine.buffer import Location, TextBuffer
from blank_engine.classify.models import Match
from blank_engine.cleanup.models import Edit
from blank_engine.engine import EngineRegistry, PolicyDecision


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_defects: Callable[[Sequence[Match]], None]
    update_status: Callable[[str], None] = _noop
    update_text: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualBlankAdapter:
    """Keeps one engine in sync with a Textual text widget."""

    def __init__(
        self,
        engines: EngineRegistry,
        hooks: TextualUIHooks,
        *,
        buffer: Optional[TextBuffer] = None,
        buffer_id: Hashable = "main",
        file_id: Optional[str] = None,
        mode_id: Optional[str] = None,
    ) -> None:
        self.engines = engines
        self.hooks = hooks
        self.buffer = buffer or TextBuffer(name=str(buffer_id))
        self.buffer_id = buffer_id
        self.buffer.on_edit(
            lambda start, end, size: engines.on_edit(buffer_id, (start, end), size)
        )
        self.buffer.on_cursor(lambda offset: engines.on_cursor_move(buffer_id, offset))
        engines.activate(
            buffer_id,
            file_id,
            mode_id,
            source=self.buffer,
            cursor=self.buffer.cursor,
        )
        self.refresh()

    def handle_text_change(self, new_text: str) -> bool:
        """Turn a widget's full text into the minimal buffer replacement.

        Returns ``False`` when the text did not change.
        """

        old_text = self.buffer.text
        if new_text == old_text:
            return False
        prefix = 0
        limit = min(len(old_text), len(new_text))
        while prefix < limit and old_text[prefix] == new_text[prefix]:
            prefix += 1
        suffix = 0
        while (
            suffix < limit - prefix
            and old_text[len(old_text) - 1 - suffix]
            == new_text[len(new_text) - 1 - suffix]
        ):
            suffix += 1
        start, end = prefix, len(old_text) - suffix
        replacement = new_text[prefix : len(new_text) - suffix]
        self.buffer.replace_range(start, end, replacement, label="widget_edit")
        self._log_state("edit ->", start=start, end=end, size=len(replacement))
        self.refresh()
        return True

    def handle_cursor(self, location: Location) -> None:
        self.buffer.move_to(location)
        self._log_state("cursor ->")
        self.refresh()

    def clean(self) -> List[Edit]:
        """Clean the whole buffer and push the result back to the widget."""

        if not self.buffer.is_modifiable():
            self.hooks.update_status("read-only: nothing cleaned")
            return []
        edits = self.engines.clean(self.buffer_id)
        if edits:
            self.buffer.apply_edits(edits)
            self.hooks.update_text(self.buffer.text)
        self._log_state("clean <-", edits=len(edits))
        self.refresh()
        return edits

    def evaluate_save(self) -> PolicyDecision:
        decision = self.engines.evaluate_save(self.buffer_id)
        for warning in decision.warnings:
            self.hooks.update_status(warning)
        if decision.abort and decision.report is not None:
            self.hooks.update_status(f"save refused: {decision.report.summary()}")
        return decision

    def refresh(self) -> List[Match]:
        matches = self.engines.query_defects(self.buffer_id)
        self.hooks.update_defects(matches)
        report = self.engines.report(self.buffer_id)
        self.hooks.update_status(f"blanks: {report.summary()}")
        return matches

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        engine = self.engines.get(self.buffer_id)
        return {
            "buffer": self.buffer.name,
            "version": self.buffer.version,
            "cursor": self.buffer.cursor,
            "kinds": ",".join(kind.value for kind in engine.style.kinds),
        }


__all__ = ["TextualBlankAdapter", "TextualUIHooks"]
