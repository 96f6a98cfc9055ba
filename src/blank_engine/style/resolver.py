"""Layered style and action resolution (per-file, per-mode, default)."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from blank_engine.runtime.telemetry import span

from .models import (
    ActionKind,
    EffectiveStyle,
    StyleLike,
    StyleSpec,
    parse_actions,
    parse_kinds,
)

V = TypeVar("V")

Table = Union[Mapping[str, V], Sequence[Tuple[str, V]]]


def _entries(table: Optional[Table[V]]) -> Iterable[Tuple[str, V]]:
    if not table:
        return ()
    if isinstance(table, Mapping):
        return table.items()
    return table


def _lookup(
    file_id: Optional[str],
    mode_id: Optional[str],
    per_file_table: Optional[Table[V]],
    per_mode_table: Optional[Table[V]],
    default: V,
) -> Tuple[str, V]:
    if file_id is not None:
        for pattern, value in _entries(per_file_table):
            if re.search(pattern, file_id):
                return "file", value
    if mode_id is not None:
        for key, value in _entries(per_mode_table):
            if key == mode_id:
                return "mode", value
    return "default", default


def resolve(
    file_id: Optional[str],
    mode_id: Optional[str],
    per_file_table: Optional[Table[StyleLike]],
    per_mode_table: Optional[Table[StyleLike]],
    default_style: StyleLike,
    *,
    tabs_preferred: bool = True,
    tab_width: int = 8,
) -> EffectiveStyle:
    """Resolve the effective style for a buffer.

    The first per-file entry whose key regex matches ``file_id`` wins, then
    the first per-mode entry equal to ``mode_id``, then ``default_style``.
    Levels are never merged. ``tabs_preferred`` and ``tab_width`` are the
    buffer's own settings and apply unless the winning entry overrides them.
    """

    with span(
        "style::resolve",
        logger_name="blank_engine.style",
        metadata={"file_id": file_id, "mode_id": mode_id},
    ) as handle:
        level, value = _lookup(
            file_id, mode_id, per_file_table, per_mode_table, default_style
        )
        spec = StyleSpec.coerce(value)
        handle.add_metadata("level", level)
        return EffectiveStyle(
            kinds=parse_kinds(spec.tokens),
            tabs_preferred=(
                tabs_preferred if spec.tabs_preferred is None else spec.tabs_preferred
            ),
            tab_width=tab_width if spec.tab_width is None else spec.tab_width,
        )


def resolve_actions(
    file_id: Optional[str],
    mode_id: Optional[str],
    per_file_table: Optional[Table[Sequence[str]]],
    per_mode_table: Optional[Table[Sequence[str]]],
    default_actions: Sequence[str],
) -> Tuple[ActionKind, ...]:
    """Resolve action tags with the same first-match-wins precedence."""

    _, value = _lookup(
        file_id, mode_id, per_file_table, per_mode_table, default_actions
    )
    if isinstance(value, str):
        value = value.replace(",", " ").split()
    return parse_actions(value)


__all__ = ["Table", "resolve", "resolve_actions"]
