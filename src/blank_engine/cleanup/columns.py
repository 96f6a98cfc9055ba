"""Column arithmetic for tab/space canonicalization."""

from __future__ import annotations


def advance(column: int, char: str, tab_width: int) -> int:
    if char == "\t":
        return (column // tab_width + 1) * tab_width
    return column + 1


def column_at(line: str, index: int, tab_width: int) -> int:
    """Visual column of ``line[index]`` when tabs stop every ``tab_width``."""

    column = 0
    for char in line[:index]:
        column = advance(column, char, tab_width)
    return column


def tabify(start_col: int, end_col: int, tab_width: int) -> str:
    """Fewest tabs+spaces spanning ``start_col`` to ``end_col``."""

    tabs = end_col // tab_width - start_col // tab_width
    if tabs <= 0:
        return " " * (end_col - start_col)
    return "\t" * tabs + " " * (end_col % tab_width)


def untabify(start_col: int, end_col: int) -> str:
    return " " * (end_col - start_col)


def canonical_run(run: str, start_col: int, tab_width: int, *, use_tabs: bool) -> str:
    """Rewrite a blank ``run`` starting at ``start_col`` without moving text.

    The text following the run lands on the same visual column as before.
    """

    end_col = start_col
    for char in run:
        end_col = advance(end_col, char, tab_width)
    if use_tabs:
        return tabify(start_col, end_col, tab_width)
    return untabify(start_col, end_col)


__all__ = ["advance", "canonical_run", "column_at", "tabify", "untabify"]
