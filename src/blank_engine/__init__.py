"""UI-agnostic engine for detecting and cleaning blank defects in text."""

__all__ = [
    "adapters",
    "buffer",
    "classify",
    "cleanup",
    "config",
    "engine",
    "errors",
    "patterns",
    "runtime",
    "style",
]

__version__ = "0.1.0"
