"""Category state machine.

Drives status transitions for one category:

    not_started -> in_progress    note added
    in_progress -> in_progress    note added or removed, notes remain
    in_progress -> not_started    last note removed
    in_progress -> complete       finalize validates
    complete    -> in_progress    note added

Removing notes never reopens a complete category. The optional category is
the only one that may be finalized without notes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from ..categories import Category, CategoryStatus, Note
from ..errors import PreconditionViolation
from ..notes import NoteStore

if TYPE_CHECKING:
    from ..inference import InferenceGateway, NoteSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteOutcome:
    """Result of submitting a note to a category.

    Attributes:
        category: Category after the submission
        note: The created note, or None if no content was detected
    """

    category: Category
    note: Note | None

    @property
    def no_content(self) -> bool:
        """Return True if the submission produced no note."""
        return self.note is None


class CategoryStateMachine:
    """Applies note submissions, removals and finalization to categories.

    Categories are immutable values: every method returns the next state
    and leaves its input untouched, so a failed call changes nothing.
    """

    def __init__(self, gateway: InferenceGateway, note_store: NoteStore | None = None) -> None:
        """Initialize state machine.

        Args:
            gateway: Inference gateway for extraction and validation.
            note_store: Note store applying note changes.
        """
        self._gateway = gateway
        self._note_store = note_store or NoteStore()

    async def add_note(self, category: Category, source: NoteSource) -> NoteOutcome:
        """Extract data from a note and append it to the category.

        Args:
            category: Category receiving the note.
            source: Typed or recorded note.

        Returns:
            NoteOutcome. On no content the category is returned unchanged.

        Raises:
            InferenceError: If extraction fails.
        """
        result = await self._gateway.extract(source, category.id, category.data)
        if result.no_content:
            return NoteOutcome(category=category, note=None)

        updated, note = self._note_store.append(category, result.transcript, result.merged_data)
        self._log_transition(category, updated)
        return NoteOutcome(category=updated, note=note)

    def remove_note(self, category: Category, note_id: str) -> Category:
        """Remove a note from the category.

        Raises:
            NoteNotFoundError: If no note has that id.
        """
        updated = self._note_store.remove(category, note_id)
        self._log_transition(category, updated)
        return updated

    async def finalize(self, category: Category) -> Category:
        """Validate the category and mark it complete if it passes.

        Args:
            category: Category to finalize.

        Returns:
            The complete category, or an in_progress category carrying
            the validator's missing information.

        Raises:
            PreconditionViolation: If a required category has no notes.
            InferenceError: If validation fails.
        """
        if category.is_complete:
            return category

        if not category.notes:
            if not category.id.is_optional:
                raise PreconditionViolation(
                    f"Cannot finalize {category.id.value} without any notes"
                )
            updated = replace(category, status=CategoryStatus.COMPLETE, missing_info=())
            self._log_transition(category, updated)
            return updated

        result = await self._gateway.validate(category.id, category.data)

        if result.is_complete:
            updated = replace(category, status=CategoryStatus.COMPLETE, missing_info=())
        else:
            logger.info(
                f"{category.id.value} incomplete, missing: {', '.join(result.missing_info)}"
            )
            updated = replace(
                category,
                status=CategoryStatus.IN_PROGRESS,
                missing_info=result.missing_info,
            )

        self._log_transition(category, updated)
        return updated

    @staticmethod
    def _log_transition(before: Category, after: Category) -> None:
        if before.status is not after.status:
            logger.info(f"{after.id.value}: {before.status.value} -> {after.status.value}")


__all__ = ["CategoryStateMachine", "NoteOutcome"]
