"""Row/column helpers for flat buffer text."""

from __future__ import annotations

from typing import Tuple

Location = Tuple[int, int]  # (row, column)


def offset_for_location(text: str, location: Location) -> int:
    """Offset of ``location`` in ``text``; columns past a line end clamp to it."""

    lines = text.split("\n")
    row, col = location
    row = min(max(row, 0), len(lines) - 1)
    offset = 0
    for i in range(row):
        offset += len(lines[i]) + 1  # newline
    offset += min(max(col, 0), len(lines[row]))
    return offset


def location_for_offset(text: str, offset: int) -> Location:
    lines = text.split("\n")
    running = 0
    for row, line in enumerate(lines):
        line_len = len(line)
        if offset <= running + line_len:
            return (row, max(offset - running, 0))
        running += line_len + 1
    return (len(lines) - 1, len(lines[-1]))


__all__ = ["Location", "location_for_offset", "offset_for_location"]
