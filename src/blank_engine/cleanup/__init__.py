"""Cleanup transformer and column helpers."""

from .columns import canonical_run, column_at, tabify, untabify
from .models import Edit, apply_edits
from .transformer import CleanupTransformer, clean

__all__ = [
    "CleanupTransformer",
    "Edit",
    "apply_edits",
    "canonical_run",
    "clean",
    "column_at",
    "tabify",
    "untabify",
]
