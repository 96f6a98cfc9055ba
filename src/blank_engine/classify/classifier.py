"""Stateless defect classification over a buffer range."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from blank_engine.errors import ensure_span
from blank_engine.patterns.registry import PatternRegistry, default_registry
from blank_engine.runtime.telemetry import span as telemetry_span
from blank_engine.style.models import DefectKind, EffectiveStyle

from .boundary import (
    BoundaryTracker,
    clip_match,
    cursor_blocks_end,
    cursor_blocks_start,
    find_empty_at_end,
    find_empty_at_start,
)
from .models import Match, line_end, line_start

Span = Tuple[int, int]


class DefectClassifier:
    """Applies registry patterns for every evaluated kind of a style."""

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        *,
        logger_name: str | None = None,
    ) -> None:
        self.registry = registry or default_registry
        self._logger_name = logger_name or "blank_engine.classify"

    def classify(
        self,
        text: str,
        span: Span,
        style: EffectiveStyle,
        *,
        tabs_preferred: Optional[bool] = None,
        tab_width: Optional[int] = None,
        cursor: Optional[int] = None,
        boundary: Optional[BoundaryTracker] = None,
    ) -> List[Match]:
        """Return the defects inside ``span`` ordered by buffer position.

        Only one variant per family is evaluated (see
        :meth:`EffectiveStyle.select`). Lines touched by ``span`` are scanned
        whole so line anchors behave, and matches are clipped to ``span``.
        ``cursor`` suppresses trailing and edge matches that contain it.
        Edge kinds go through ``boundary`` when given.
        """

        start, end = ensure_span(span, len(text))
        if not style:
            return []
        tabs = style.tabs_preferred if tabs_preferred is None else tabs_preferred
        width = style.tab_width if tab_width is None else tab_width

        with telemetry_span(
            "classify::range",
            logger_name=self._logger_name,
            metadata={"start": start, "end": end, "kinds": len(style.kinds)},
        ) as handle:
            ranked: List[Tuple[int, int, int, Match]] = []
            for order, kind in enumerate(style.evaluated_kinds()):
                if kind.boundary:
                    found = self._edge(text, (start, end), kind, cursor, boundary)
                    matches: Iterator[Match] = iter((found,) if found else ())
                else:
                    matches = self._scan(text, (start, end), kind, tabs, width, cursor)
                for match in matches:
                    ranked.append((match.start, match.end, order, match))
            ranked.sort(key=lambda item: item[:3])
            handle.add_metadata("matches", len(ranked))
            return [item[3] for item in ranked]

    def _scan(
        self,
        text: str,
        span: Span,
        kind: DefectKind,
        tabs_preferred: bool,
        tab_width: int,
        cursor: Optional[int],
    ) -> Iterator[Match]:
        compiled = self.registry.compile(
            kind, tabs_preferred=tabs_preferred, tab_width=tab_width
        )
        lo = line_start(text, span[0])
        hi = line_end(text, span[1])
        for found in compiled.regex.finditer(text, lo, hi):
            group_span = found.span(compiled.group)
            if (
                kind.cursor_suppressible
                and cursor is not None
                and group_span[0] <= cursor <= group_span[1]
            ):
                continue
            clipped = clip_match(kind, group_span, span)
            if clipped is not None:
                yield clipped

    def _edge(
        self,
        text: str,
        span: Span,
        kind: DefectKind,
        cursor: Optional[int],
        boundary: Optional[BoundaryTracker],
    ) -> Optional[Match]:
        if boundary is not None:
            return boundary.query(text, span, kind)

        if kind is DefectKind.EMPTY_AT_START:
            found = find_empty_at_start(text, self.registry)
            if found is None or cursor_blocks_start(found, cursor):
                return None
        else:
            found = find_empty_at_end(text, self.registry)
            if found is None or cursor_blocks_end(found, cursor, len(text)):
                return None
        return clip_match(kind, found, span)


def classify(
    text: str,
    span: Span,
    style: EffectiveStyle,
    *,
    tabs_preferred: Optional[bool] = None,
    tab_width: Optional[int] = None,
    cursor: Optional[int] = None,
) -> List[Match]:
    """Classify with the default registry and no boundary tracking."""

    return DefectClassifier().classify(
        text,
        span,
        style,
        tabs_preferred=tabs_preferred,
        tab_width=tab_width,
        cursor=cursor,
    )


__all__ = ["DefectClassifier", "classify"]
