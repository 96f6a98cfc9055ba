"""Reference host buffer used by tests and the Textual adapter."""

from .buffer import BufferDelta, TextBuffer, Transaction
from .document import Location, location_for_offset, offset_for_location
from .sync import BufferMirror

__all__ = [
    "BufferDelta",
    "BufferMirror",
    "Location",
    "TextBuffer",
    "Transaction",
    "location_for_offset",
    "offset_for_location",
]
