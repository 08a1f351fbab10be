"""Notes module for field monitoring.

Provides the note store that appends and removes category notes.
"""

from .store import NoteStore

__all__ = ["NoteStore"]
