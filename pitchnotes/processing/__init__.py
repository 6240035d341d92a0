"""Processing layer - Event-level post-processing.

This layer turns raw per-frame pitch events into discrete note events:
- Fixed-window grouping
- Per-group pitch deduplication and velocity
- Duration from the gap to the next group
"""

from .quantize import NoteQuantizer

__all__ = [
    "NoteQuantizer",
]
