"""Note store for category notes and structured data.

Appends and removes notes on a Category value and applies the status side
effects of each change. Categories are immutable, so every operation
returns the updated Category.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime

from ..categories import Category, CategoryData, CategoryStatus, Note, empty_data, new_note_id
from ..errors import NoteNotFoundError

logger = logging.getLogger(__name__)


class NoteStore:
    """Applies note additions and removals to categories.

    Example:
        store = NoteStore()
        category, note = store.append(category, "Found one obsidian flake", data)
        category = store.remove(category, note.id)
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = new_note_id,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize note store.

        Args:
            id_factory: Generates fresh note ids.
            clock: Returns the current time. Defaults to UTC now.
        """
        self._id_factory = id_factory
        self._clock = clock or (lambda: datetime.now(UTC))

    def append(
        self,
        category: Category,
        text: str,
        extracted_data: CategoryData,
    ) -> tuple[Category, Note]:
        """Append a note and replace the category's structured data.

        The category always moves to in_progress, reopening it if it was
        complete.

        Args:
            category: Category receiving the note.
            text: Final transcript of the note.
            extracted_data: Merged structured data for the category.

        Returns:
            Tuple of (updated category, created note).
        """
        note = Note(text=text, id=self._id_factory(), timestamp=self._clock())
        missing_info = () if category.is_complete else category.missing_info

        updated = replace(
            category,
            notes=(*category.notes, note),
            data=extracted_data,
            status=CategoryStatus.IN_PROGRESS,
            missing_info=missing_info,
        )

        if category.is_complete:
            logger.info(f"Reopened {category.id.value} after new note {note.id}")
        logger.debug(f"Appended note {note.id} to {category.id.value} ({len(updated.notes)} notes)")

        return updated, note

    def remove(self, category: Category, note_id: str) -> Category:
        """Remove a note by id.

        Removing the last note resets a category that is not complete back
        to not_started. A complete category keeps its status.

        Args:
            category: Category holding the note.
            note_id: Id of the note to delete.

        Returns:
            The updated category.

        Raises:
            NoteNotFoundError: If no note has that id.
        """
        if category.find_note(note_id) is None:
            raise NoteNotFoundError(note_id)

        notes = tuple(note for note in category.notes if note.id != note_id)

        if not notes and not category.is_complete:
            logger.info(f"Last note removed from {category.id.value}, resetting to not_started")
            return replace(
                category,
                notes=(),
                data=empty_data(category.id),
                status=CategoryStatus.NOT_STARTED,
                missing_info=(),
            )

        return replace(category, notes=notes)


__all__ = ["NoteStore"]
