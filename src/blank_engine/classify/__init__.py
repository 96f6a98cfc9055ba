"""Defect classification and edge-region tracking."""

from .boundary import BoundaryTracker, EdgeMarker, find_empty_at_end, find_empty_at_start
from .classifier import DefectClassifier, classify
from .models import Match

__all__ = [
    "BoundaryTracker",
    "DefectClassifier",
    "EdgeMarker",
    "Match",
    "classify",
    "find_empty_at_end",
    "find_empty_at_start",
]
