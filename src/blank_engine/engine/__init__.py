"""Per-buffer engines, the host registry and action policies."""

from .policy import DefectReport, PolicyDecision, evaluate_activation, evaluate_save
from .registry import EngineRegistry
from .session import BlankEngine, BufferSource

__all__ = [
    "BlankEngine",
    "BufferSource",
    "DefectReport",
    "EngineRegistry",
    "PolicyDecision",
    "evaluate_activation",
    "evaluate_save",
]
