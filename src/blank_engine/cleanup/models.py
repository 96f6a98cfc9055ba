"""Edit records produced by cleanup and helpers to apply them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from blank_engine.errors import ensure_span


@dataclass(frozen=True, slots=True)
class Edit:
    """Replace ``[start, end)`` with ``text``."""

    start: int
    end: int
    text: str = ""

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid edit span ({self.start}, {self.end})")

    @property
    def span(self) -> Tuple[int, int]:
        return (self.start, self.end)

    @property
    def delta(self) -> int:
        return len(self.text) - (self.end - self.start)


def apply_edits(text: str, edits: Iterable[Edit]) -> str:
    """Apply a batch of non-overlapping edits expressed in ``text`` coordinates."""

    ordered: List[Edit] = sorted(edits, key=lambda edit: (edit.start, edit.end))
    pieces: List[str] = []
    cursor = 0
    for edit in ordered:
        ensure_span(edit.span, len(text))
        if edit.start < cursor:
            raise ValueError(f"edit {edit.span!r} overlaps a previous edit")
        pieces.append(text[cursor : edit.start])
        pieces.append(edit.text)
        cursor = edit.end
    pieces.append(text[cursor:])
    return "".join(pieces)


__all__ = ["Edit", "apply_edits"]
