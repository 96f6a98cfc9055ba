"""Defect kinds, effective styles, and layered style resolution."""

from .models import (
    ActionKind,
    DefectFamily,
    DefectKind,
    EffectiveStyle,
    StyleSpec,
    Variant,
    parse_actions,
    parse_kinds,
)
from .resolver import resolve, resolve_actions

__all__ = [
    "ActionKind",
    "DefectFamily",
    "DefectKind",
    "EffectiveStyle",
    "StyleSpec",
    "Variant",
    "parse_actions",
    "parse_kinds",
    "resolve",
    "resolve_actions",
]
