"""Per-buffer engine instance tying style, tracker and passes together."""

from __future__ import annotations

from typing import (
    Hashable,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)

from blank_engine.classify.boundary import BoundaryTracker
from blank_engine.classify.classifier import DefectClassifier
from blank_engine.classify.models import Match
from blank_engine.cleanup.models import Edit
from blank_engine.cleanup.transformer import CleanupTransformer
from blank_engine.errors import OutOfRangeError
from blank_engine.patterns.registry import PatternRegistry, default_registry
from blank_engine.runtime import telemetry
from blank_engine.style.models import ActionKind, EffectiveStyle

from .policy import DefectReport

Span = Tuple[int, int]


@runtime_checkable
class BufferSource(Protocol):
    """What the host exposes so the engine can read a buffer."""

    def pull_text(self) -> str:
        """Return the buffer's current full text."""
        ...

    def is_modifiable(self) -> bool:
        ...


class BlankEngine:
    """Blank-defect state for one activated buffer.

    The host must report every edit through :meth:`on_edit` and every cursor
    move through :meth:`on_cursor_move` before the next query, otherwise the
    edge markers go stale.
    """

    def __init__(
        self,
        buffer_id: Hashable,
        source: BufferSource,
        style: EffectiveStyle,
        actions: Sequence[ActionKind] = (),
        *,
        cursor: int = 0,
        registry: PatternRegistry | None = None,
        logger_name: str | None = None,
    ) -> None:
        self.buffer_id = buffer_id
        self.source = source
        self.style = style
        self.actions: Tuple[ActionKind, ...] = tuple(actions)
        self.registry = registry or default_registry
        self.cursor = cursor
        self.logger = telemetry.get_logger(logger_name or "blank_engine.engine")
        self.tracker = BoundaryTracker(
            self.registry, cursor=cursor, logger_name="blank_engine.boundary"
        )
        self.classifier = DefectClassifier(self.registry)
        self.transformer = CleanupTransformer(self.registry)

    def restyle(self, style: EffectiveStyle, actions: Sequence[ActionKind]) -> None:
        self.style = style
        self.actions = tuple(actions)
        self.tracker.reset()

    def on_edit(self, start: int, end: int, new_length: int) -> None:
        if start < 0 or end < start or new_length < 0:
            raise OutOfRangeError(
                f"Invalid edit ({start}, {end}) -> {new_length} chars",
                span=(start, end),
            )
        self.tracker.notify_edit(start, end, new_length)

    def on_cursor_move(self, position: int) -> None:
        if position < 0:
            raise OutOfRangeError(f"Invalid cursor position {position}")
        self.cursor = position
        self.tracker.notify_cursor(position)

    def query_defects(self, span: Optional[Span] = None) -> List[Match]:
        """Live classification honouring the cursor and the edge markers."""

        text = self.source.pull_text()
        return self.classifier.classify(
            text,
            span if span is not None else (0, len(text)),
            self.style,
            cursor=self.cursor,
            boundary=self.tracker,
        )

    def clean(self, span: Optional[Span] = None) -> List[Edit]:
        return self.transformer.clean(
            self.source.pull_text(),
            self.style,
            span,
            modifiable=self.source.is_modifiable(),
            buffer_id=self.buffer_id,
        )

    def report(self, text: Optional[str] = None) -> DefectReport:
        """Count every defect in ``text`` (the buffer by default).

        Reports ignore the cursor: a defect under the cursor still counts.
        """

        if text is None:
            text = self.source.pull_text()
        matches = self.classifier.classify(text, (0, len(text)), self.style)
        report = DefectReport.from_matches(
            self.style.evaluated_kinds(), matches, len(text)
        )
        self.logger.debug("report %s: %s", self.buffer_id, report.summary())
        return report


__all__ = ["BlankEngine", "BufferSource"]
