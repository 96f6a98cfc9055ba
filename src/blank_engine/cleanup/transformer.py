"""Column-preserving cleanup of blank defects."""

from __future__ import annotations

from typing import Callable, Dict, Hashable, Iterator, List, Optional, Tuple

from blank_engine.classify.boundary import find_empty_at_end, find_empty_at_start
from blank_engine.classify.models import line_end, line_start
from blank_engine.errors import ReadOnlyError, ensure_span
from blank_engine.patterns.registry import (
    CompiledPattern,
    PatternRegistry,
    default_registry,
)
from blank_engine.runtime.telemetry import span as telemetry_span
from blank_engine.style.models import DefectFamily, DefectKind, EffectiveStyle

from .columns import canonical_run, column_at
from .models import Edit

Span = Tuple[int, int]
LineStep = Callable[[str], str]

_BLANK = " \t"


def _leading_run(line: str) -> str:
    return line[: len(line) - len(line.lstrip(_BLANK))]


def _blank_runs(line: str) -> Iterator[Span]:
    """Yield ``(start, end)`` of every maximal space/tab run in ``line``."""

    index = 0
    length = len(line)
    while index < length:
        if line[index] in _BLANK:
            start = index
            while index < length and line[index] in _BLANK:
                index += 1
            yield start, index
        else:
            index += 1


def _line_edit(offset: int, old: str, new: str) -> Edit:
    prefix = 0
    limit = min(len(old), len(new))
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and old[len(old) - 1 - suffix] == new[len(new) - 1 - suffix]
    ):
        suffix += 1
    return Edit(
        start=offset + prefix,
        end=offset + len(old) - suffix,
        text=new[prefix : len(new) - suffix],
    )


class CleanupTransformer:
    """Computes the edits that remove the active defects from a buffer."""

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        *,
        logger_name: str | None = None,
    ) -> None:
        self.registry = registry or default_registry
        self._logger_name = logger_name or "blank_engine.cleanup"

    def clean(
        self,
        text: str,
        style: EffectiveStyle,
        span: Optional[Span] = None,
        *,
        tabs_preferred: Optional[bool] = None,
        tab_width: Optional[int] = None,
        modifiable: bool = True,
        buffer_id: Hashable | None = None,
    ) -> List[Edit]:
        """Return sorted, non-overlapping edits fixing the defects of ``style``.

        ``span=None`` cleans the whole buffer, which also removes blank lines
        at the buffer edges. A span is widened to the lines it touches. The
        visual column of every non-blank character is preserved.
        """

        if not modifiable:
            raise ReadOnlyError("Buffer is read-only", buffer_id=buffer_id)
        if span is not None:
            span = ensure_span(span, len(text))
        if not style:
            return []
        tabs = style.tabs_preferred if tabs_preferred is None else tabs_preferred
        width = style.tab_width if tab_width is None else tab_width

        with telemetry_span(
            "cleanup::run",
            logger_name=self._logger_name,
            metadata={"span": span, "kinds": len(style.kinds), "buffer": buffer_id},
        ) as handle:
            edits: List[Edit] = []
            region: Optional[Span]
            if span is None:
                edits, region = self._edge_edits(text, style)
            else:
                region = (line_start(text, span[0]), line_end(text, span[1]))

            steps = self._line_steps(style, tabs, width)
            if steps and region is not None:
                edits.extend(self._line_edits(text, region[0], region[1], steps))

            edits.sort(key=lambda edit: (edit.start, edit.end))
            handle.add_metadata("edits", len(edits))
            return edits

    def _edge_edits(
        self, text: str, style: EffectiveStyle
    ) -> Tuple[List[Edit], Optional[Span]]:
        """Delete blank edge regions and return the line range left to scan.

        The range is ``(first line start, last line end)``; ``None`` when the
        edge regions cover the whole buffer.
        """

        lo, hi = 0, len(text)
        edits: List[Edit] = []
        head: Optional[Span] = None
        if DefectKind.EMPTY_AT_START in style:
            head = find_empty_at_start(text, self.registry)
            if head is not None:
                edits.append(Edit(*head))
                lo = head[1]
        if DefectKind.EMPTY_AT_END in style:
            tail = find_empty_at_end(text, self.registry)
            if tail is not None:
                if tail[0] <= lo:
                    start = head[0] if head is not None else tail[0]
                    return [Edit(start, max(lo, tail[1]))], None
                edits.append(Edit(*tail))
                # tail starts a line, so the kept text ends on a newline
                hi = tail[0] - 1
        return edits, (lo, hi)

    def _line_steps(
        self, style: EffectiveStyle, tabs_preferred: bool, tab_width: int
    ) -> List[LineStep]:
        active: Dict[DefectFamily, CompiledPattern] = {}
        for family in DefectFamily:
            kind = style.select(family)
            if kind is not None:
                active[family] = self.registry.compile(
                    kind, tabs_preferred=tabs_preferred, tab_width=tab_width
                )

        steps: List[LineStep] = []
        indentation = active.get(DefectFamily.INDENTATION)
        if indentation is not None:
            steps.append(lambda line: self._fix_indentation(line, indentation))
        if DefectKind.TRAILING in style:
            trailing = self.registry.compile(
                DefectKind.TRAILING, tabs_preferred=tabs_preferred, tab_width=tab_width
            )
            steps.append(lambda line: self._drop_groups(line, trailing))
        after_tab = active.get(DefectFamily.SPACE_AFTER_TAB)
        if after_tab is not None:
            steps.append(lambda line: self._fix_space_after_tab(line, after_tab))
        before_tab = active.get(DefectFamily.SPACE_BEFORE_TAB)
        if before_tab is not None:
            steps.append(lambda line: self._fix_space_before_tab(line, before_tab))
        return steps

    def _line_edits(
        self, text: str, lo: int, hi: int, steps: List[LineStep]
    ) -> List[Edit]:
        edits: List[Edit] = []
        offset = lo
        while offset <= hi:
            stop = line_end(text, offset)
            old = text[offset:stop]
            new = old
            for step in steps:
                new = step(new)
            if new != old:
                edits.append(_line_edit(offset, old, new))
            if stop >= hi:
                break
            offset = stop + 1
        return edits

    @staticmethod
    def _fix_indentation(line: str, compiled: CompiledPattern) -> str:
        if not compiled.regex.search(line):
            return line
        run = _leading_run(line)
        replacement = canonical_run(
            run, 0, compiled.tab_width, use_tabs=compiled.use_tabs
        )
        return replacement + line[len(run) :]

    @staticmethod
    def _drop_groups(line: str, compiled: CompiledPattern) -> str:
        pieces: List[str] = []
        cursor = 0
        for found in compiled.regex.finditer(line):
            start, end = found.span(compiled.group)
            if start < cursor or start == end:
                continue
            pieces.append(line[cursor:start])
            cursor = end
        pieces.append(line[cursor:])
        return "".join(pieces)

    @classmethod
    def _fix_space_after_tab(cls, line: str, compiled: CompiledPattern) -> str:
        if not compiled.use_tabs:
            # a tab left elsewhere in the run would end up before the new spaces
            return cls._fix_blank_runs(line, compiled)
        pieces: List[str] = []
        cursor = 0
        for found in compiled.regex.finditer(line):
            start, end = found.span()
            pieces.append(line[cursor:start])
            pieces.append(
                canonical_run(
                    line[start:end],
                    column_at(line, start, compiled.tab_width),
                    compiled.tab_width,
                    use_tabs=True,
                )
            )
            cursor = end
        pieces.append(line[cursor:])
        return "".join(pieces)

    @classmethod
    def _fix_space_before_tab(cls, line: str, compiled: CompiledPattern) -> str:
        return cls._fix_blank_runs(line, compiled)

    @staticmethod
    def _fix_blank_runs(line: str, compiled: CompiledPattern) -> str:
        """Re-emit every maximal blank run that ``compiled`` matches."""

        pieces: List[str] = []
        cursor = 0
        for start, end in _blank_runs(line):
            run = line[start:end]
            if not compiled.regex.search(run):
                continue
            pieces.append(line[cursor:start])
            pieces.append(
                canonical_run(
                    run,
                    column_at(line, start, compiled.tab_width),
                    compiled.tab_width,
                    use_tabs=compiled.use_tabs,
                )
            )
            cursor = end
        pieces.append(line[cursor:])
        return "".join(pieces)


def clean(
    text: str,
    style: EffectiveStyle,
    span: Optional[Span] = None,
    *,
    tabs_preferred: Optional[bool] = None,
    tab_width: Optional[int] = None,
    modifiable: bool = True,
) -> List[Edit]:
    """Clean with the default registry."""

    return CleanupTransformer().clean(
        text,
        style,
        span,
        tabs_preferred=tabs_preferred,
        tab_width=tab_width,
        modifiable=modifiable,
    )


__all__ = ["CleanupTransformer", "clean"]
