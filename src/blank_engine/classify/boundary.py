"""Incremental tracking of empty regions at the buffer edges.

Detecting blank lines at the start or end of a buffer means scanning from the
edge. The :class:`BoundaryTracker` remembers how far the last scan reached so
queries far from an edge are rejected without touching the text, and edits
far from an edge leave the remembered extent alone.

Each edge keeps an :class:`EdgeMarker`:

* ``position is None`` -- unknown; the next query rescans from the edge.
* ``position == P`` -- for the start edge the empty region ends at ``P``; for
  the end edge it begins at ``P``.

The marker's ``guard`` is the far end of the first non-blank line next to the
region (its newline for the start edge, its first character for the end
edge). Only edits reaching the guard can change the region, so everything
else keeps the marker.

While the cursor sits inside an edge region (or on the edge itself) the
region is not reported and the marker is clamped to the cursor; the next
cursor move makes the marker unknown again so the region shows up on the
following query.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from blank_engine.patterns.registry import PatternRegistry, default_registry
from blank_engine.runtime import telemetry
from blank_engine.style.models import DefectKind

from .models import Match, line_end, line_start

Span = Tuple[int, int]

_BLANKS = " \t\n"


def find_empty_at_start(
    text: str, registry: Optional[PatternRegistry] = None
) -> Optional[Span]:
    """Span of the blank lines opening ``text``, if any."""

    compiled = (registry or default_registry).compile(
        DefectKind.EMPTY_AT_START, tabs_preferred=True, tab_width=1
    )
    found = compiled.regex.match(text)
    if not found:
        return None
    return found.span(compiled.group)


def _tail_floor(text: str) -> int:
    index = len(text)
    while index > 0 and text[index - 1] in _BLANKS:
        index -= 1
    return index


def find_empty_at_end(
    text: str, registry: Optional[PatternRegistry] = None
) -> Optional[Span]:
    """Span of the blank lines closing ``text``, if any.

    The search starts right after the last non-blank character, so the cost
    depends on the size of the blank tail only.
    """

    compiled = (registry or default_registry).compile(
        DefectKind.EMPTY_AT_END, tabs_preferred=True, tab_width=1
    )
    found = compiled.regex.search(text, _tail_floor(text))
    if not found:
        return None
    return found.span(compiled.group)


def cursor_blocks_start(span: Span, cursor: Optional[int]) -> bool:
    return cursor is not None and span[0] <= cursor < span[1]


def cursor_blocks_end(span: Span, cursor: Optional[int], length: int) -> bool:
    return cursor is not None and (span[0] <= cursor <= span[1] or cursor == length)


def clip_match(kind: DefectKind, found: Span, query: Span) -> Optional[Match]:
    start = max(found[0], query[0])
    end = min(found[1], query[1])
    if start >= end:
        return None
    return Match(kind=kind, start=start, end=end)


@dataclass(slots=True)
class EdgeMarker:
    position: Optional[int] = None
    guard: int = 0
    clamped: bool = False

    @property
    def unknown(self) -> bool:
        return self.position is None

    def invalidate(self) -> None:
        self.position = None
        self.clamped = False

    def settle(self, position: int, guard: int, *, clamped: bool = False) -> None:
        self.position = position
        self.guard = guard
        self.clamped = clamped


class BoundaryTracker:
    """Owns the start/end markers of one buffer."""

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        *,
        cursor: Optional[int] = None,
        logger_name: str | None = None,
    ) -> None:
        self.registry = registry or default_registry
        self.bob = EdgeMarker()
        self.eob = EdgeMarker()
        self.cursor = cursor
        self.logger = telemetry.get_logger(logger_name or "blank_engine.boundary")

    def reset(self) -> None:
        self.bob.invalidate()
        self.eob.invalidate()

    def query(self, text: str, span: Span, kind: DefectKind) -> Optional[Match]:
        if kind is DefectKind.EMPTY_AT_START:
            return self.query_start(text, span)
        if kind is DefectKind.EMPTY_AT_END:
            return self.query_end(text, span)
        raise ValueError(f"'{kind.value}' is not an edge kind")

    def _cursor(self, length: int) -> Optional[int]:
        if self.cursor is None:
            return None
        return min(max(self.cursor, 0), length)

    def query_start(self, text: str, span: Span) -> Optional[Match]:
        marker = self.bob
        if marker.position is not None and span[0] > marker.position:
            return None

        found = find_empty_at_start(text, self.registry)
        if found is None:
            marker.settle(0, line_end(text, 0))
            return None

        guard = line_end(text, found[1])
        cursor = self._cursor(len(text))
        if cursor_blocks_start(found, cursor):
            assert cursor is not None
            marker.settle(cursor, guard, clamped=True)
            self.logger.debug("empty-at-start suppressed at cursor %d", cursor)
            return None

        marker.settle(found[1], guard)
        return clip_match(DefectKind.EMPTY_AT_START, found, span)

    def query_end(self, text: str, span: Span) -> Optional[Match]:
        marker = self.eob
        length = len(text)
        if marker.position is not None and span[1] < marker.position:
            return None

        found = find_empty_at_end(text, self.registry)
        floor = _tail_floor(text)
        guard = line_start(text, floor) if floor else 0
        if found is None:
            marker.settle(length, guard)
            return None

        cursor = self._cursor(length)
        if cursor_blocks_end(found, cursor, length):
            assert cursor is not None
            marker.settle(cursor, guard, clamped=True)
            self.logger.debug("empty-at-end suppressed at cursor %d", cursor)
            return None

        marker.settle(found[0], guard)
        return clip_match(DefectKind.EMPTY_AT_END, found, span)

    def notify_edit(self, start: int, end: int, new_length: int) -> None:
        """Record that ``[start, end)`` was replaced by ``new_length`` chars."""

        if self.bob.position is not None and start <= self.bob.guard:
            self.bob.invalidate()

        if self.eob.position is not None:
            if end >= self.eob.guard:
                self.eob.invalidate()
            else:
                delta = new_length - (end - start)
                self.eob.position += delta
                self.eob.guard += delta

    def notify_cursor(self, position: int) -> None:
        if position == self.cursor:
            return
        self.cursor = position
        for marker in (self.bob, self.eob):
            if marker.clamped:
                marker.invalidate()


__all__ = [
    "BoundaryTracker",
    "clip_match",
    "EdgeMarker",
    "cursor_blocks_end",
    "cursor_blocks_start",
    "find_empty_at_end",
    "find_empty_at_start",
]
