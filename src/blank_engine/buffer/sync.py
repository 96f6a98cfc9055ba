"""Snapshot type handed to hosts that render a buffer."""

from __future__ import annotations

from dataclasses import dataclass, field

from .document import Location


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: int
    location: Location
    modifiable: bool = True
    attributes: dict[str, str] = field(default_factory=dict)


__all__ = ["BufferMirror"]
