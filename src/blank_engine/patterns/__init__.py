"""Pattern templates for each defect kind."""

from .registry import (
    CompiledPattern,
    Pattern,
    PatternRegistry,
    TabPreference,
    default_registry,
    generic_kind,
)

__all__ = [
    "CompiledPattern",
    "Pattern",
    "PatternRegistry",
    "TabPreference",
    "default_registry",
    "generic_kind",
]
