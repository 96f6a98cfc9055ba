"""Exception types surfaced by the blank defect engine."""

from __future__ import annotations

from typing import Hashable, Optional, Tuple

Span = Tuple[int, int]


class BlankEngineError(RuntimeError):
    """Base class for every error the engine raises."""


class OutOfRangeError(BlankEngineError):
    """Raised when a query or cleanup span falls outside the buffer."""

    def __init__(
        self, message: str, *, span: Optional[Span] = None, length: int | None = None
    ) -> None:
        super().__init__(message)
        self.span = span
        self.length = length


class ReadOnlyError(BlankEngineError):
    """Raised when cleanup is requested on a buffer the host marks read-only."""

    def __init__(self, message: str, *, buffer_id: Hashable | None = None) -> None:
        super().__init__(message)
        self.buffer_id = buffer_id


class UnknownBufferError(BlankEngineError):
    """Raised when a notification targets a buffer with no active engine."""

    def __init__(self, buffer_id: Hashable) -> None:
        super().__init__(f"No engine is active for buffer '{buffer_id}'")
        self.buffer_id = buffer_id


def ensure_span(span: Span, length: int) -> Span:
    """Validate ``span`` against a buffer of ``length`` characters."""

    start, end = span
    if start < 0 or end > length or start > end:
        raise OutOfRangeError(
            f"Span {span!r} is outside buffer bounds [0, {length}]",
            span=span,
            length=length,
        )
    return start, end


__all__ = [
    "BlankEngineError",
    "OutOfRangeError",
    "ReadOnlyError",
    "UnknownBufferError",
    "ensure_span",
]
