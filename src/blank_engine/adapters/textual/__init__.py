"""Textual host adapter.

Only the controller is imported here; the demo app needs the ``textual``
package and lives in :mod:`blank_engine.adapters.textual.app`.
"""

from .controller import TextualBlankAdapter, TextualUIHooks

__all__ = ["TextualBlankAdapter", "TextualUIHooks"]
