"""Reference in-memory buffer that feeds a :class:`BlankEngine`."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, ContextManager, Iterable, List, Optional

from blank_engine.cleanup.models import Edit
from blank_engine.errors import OutOfRangeError, ReadOnlyError, ensure_span
from blank_engine.runtime import telemetry

from .document import Location, location_for_offset, offset_for_location
from .sync import BufferMirror

EditListener = Callable[[int, int, int], None]
CursorListener = Callable[[int], None]


@dataclass(slots=True)
class BufferDelta:
    version: int
    start: int
    end: int
    new_length: int
    label: str


class TextBuffer:
    """Flat text plus a cursor offset.

    Listeners receive ``(start, end, new_length)`` after every replacement and
    the new offset after every cursor move, which is exactly what the engine's
    ``on_edit``/``on_cursor_move`` notifications expect.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: str = "default",
        cursor: int = 0,
        modifiable: bool = True,
    ) -> None:
        self.name = name
        self._text = text
        self.cursor = min(max(cursor, 0), len(text))
        self.modifiable = modifiable
        self.version = 0
        self._edit_listeners: List[EditListener] = []
        self._cursor_listeners: List[CursorListener] = []

    def pull_text(self) -> str:
        return self._text

    def is_modifiable(self) -> bool:
        return self.modifiable

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def on_edit(self, listener: EditListener) -> None:
        self._edit_listeners.append(listener)

    def on_cursor(self, listener: CursorListener) -> None:
        self._cursor_listeners.append(listener)

    def location(self) -> Location:
        return location_for_offset(self._text, self.cursor)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self._text,
            cursor=self.cursor,
            location=self.location(),
            modifiable=self.modifiable,
            attributes=dict(attributes or {}),
        )

    def set_cursor(self, offset: int) -> None:
        if not 0 <= offset <= len(self._text):
            raise OutOfRangeError(
                f"Cursor {offset} is outside buffer bounds [0, {len(self._text)}]",
                length=len(self._text),
            )
        if offset == self.cursor:
            return
        self.cursor = offset
        for listener in list(self._cursor_listeners):
            listener(offset)

    def move_to(self, location: Location) -> None:
        self.set_cursor(offset_for_location(self._text, location))

    def replace_range(
        self, start: int, end: int, text: str, *, label: str = "replace"
    ) -> BufferDelta:
        if not self.modifiable:
            raise ReadOnlyError(
                f"Buffer '{self.name}' is read-only", buffer_id=self.name
            )
        start, end = ensure_span((start, end), len(self._text))
        with Transaction(self, label):
            self._text = self._text[:start] + text + self._text[end:]
            self.version += 1
            moved = self._shift_cursor(start, end, len(text))
            for listener in list(self._edit_listeners):
                listener(start, end, len(text))
            if moved:
                for cursor_listener in list(self._cursor_listeners):
                    cursor_listener(self.cursor)
        return BufferDelta(
            version=self.version,
            start=start,
            end=end,
            new_length=len(text),
            label=label,
        )

    def insert_text(self, text: str, *, offset: Optional[int] = None) -> BufferDelta:
        position = self.cursor if offset is None else offset
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(self, start: int, end: int) -> BufferDelta:
        return self.replace_range(start, end, "", label="delete_range")

    def apply_edits(self, edits: Iterable[Edit], *, label: str = "cleanup") -> int:
        """Apply a cleanup batch, back to front so earlier offsets stay valid."""

        ordered = sorted(edits, key=lambda edit: edit.start, reverse=True)
        for edit in ordered:
            self.replace_range(edit.start, edit.end, edit.text, label=label)
        return len(ordered)

    def _shift_cursor(self, start: int, end: int, new_length: int) -> bool:
        """Keep the cursor on the same text; return whether it moved."""

        before = self.cursor
        if self.cursor >= end:
            self.cursor += new_length - (end - start)
        elif self.cursor > start:
            self.cursor = start + min(self.cursor - start, new_length)
        return self.cursor != before


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: TextBuffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["BufferDelta", "TextBuffer", "Transaction"]
