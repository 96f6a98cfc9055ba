"""Match records produced by classification queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from blank_engine.style.models import DefectKind


@dataclass(frozen=True, slots=True)
class Match:
    """A defect of ``kind`` covering ``[start, end)`` in buffer coordinates."""

    kind: DefectKind
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid match span ({self.start}, {self.end})")

    @property
    def span(self) -> Tuple[int, int]:
        return (self.start, self.end)

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, position: int) -> bool:
        return self.start <= position < self.end


def line_start(text: str, index: int) -> int:
    return text.rfind("\n", 0, index) + 1


def line_end(text: str, index: int) -> int:
    """Index of the newline ending the line holding ``index`` (or ``len``)."""

    end = text.find("\n", index)
    return len(text) if end == -1 else end


__all__ = ["Match", "line_end", "line_start"]
