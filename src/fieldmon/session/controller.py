"""Session controller owning the job state.

The controller is the only writer of JobState. Presentation code reads the
state as plain immutable values and changes it only through the methods
below.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..categories import Category, CategoryId, JobState
from ..errors import CategoryBusyError, JobResetError, PreconditionViolation
from ..notes import NoteStore
from ..report import FieldReport, JobAggregator
from ..workflow import CategoryStateMachine, NoteOutcome

if TYPE_CHECKING:
    from ..inference import InferenceGateway, NoteSource

logger = logging.getLogger(__name__)


class AppView(Enum):
    """Screen the presentation layer should show."""

    DASHBOARD = "dashboard"
    CATEGORY = "category"
    REPORT = "report"


class SessionController:
    """Routes user intents to the category workflow and report generation.

    Example:
        session = SessionController(InferenceGateway(backend))
        session.select_category(CategoryId.FINDS)
        await session.add_note(CategoryId.FINDS, TextNote("Found one obsidian flake"))
        await session.finalize_category(CategoryId.FINDS)
    """

    def __init__(self, gateway: InferenceGateway, note_store: NoteStore | None = None) -> None:
        """Initialize session with a fresh job.

        Args:
            gateway: Inference gateway shared by every category.
            note_store: Note store applying note changes.
        """
        self._state_machine = CategoryStateMachine(gateway, note_store)
        self._aggregator = JobAggregator(gateway)
        self._job_state = JobState.initial()
        self._report: FieldReport | None = None
        self._view = AppView.DASHBOARD
        self._active_category: CategoryId | None = None
        self._processing: set[CategoryId] = set()
        self._generating_report = False
        self._generation = 0

    @property
    def job_state(self) -> JobState:
        """Get the current job state."""
        return self._job_state

    @property
    def report(self) -> FieldReport | None:
        """Get the last generated report, if any."""
        return self._report

    @property
    def view(self) -> AppView:
        """Get the active view."""
        return self._view

    @property
    def active_category(self) -> CategoryId | None:
        """Get the category currently open, if any."""
        return self._active_category

    @property
    def is_job_complete(self) -> bool:
        """Return True if every required category is complete."""
        return self._job_state.is_job_complete

    @property
    def is_generating_report(self) -> bool:
        """Return True while the final report is being generated."""
        return self._generating_report

    def is_processing(self, category_id: CategoryId) -> bool:
        """Return True while a request for the category is in flight."""
        return category_id in self._processing

    def category(self, category_id: CategoryId) -> Category:
        """Get the current state of a category."""
        return self._job_state[category_id]

    def select_category(self, category_id: CategoryId) -> Category:
        """Open a category for note capture."""
        self._active_category = category_id
        self._view = AppView.CATEGORY
        return self._job_state[category_id]

    def back_to_dashboard(self) -> None:
        """Return to the category overview."""
        self._active_category = None
        self._view = AppView.DASHBOARD

    def update_category(self, category_id: CategoryId, **changes: Any) -> Category:
        """Shallow-merge changes into a category.

        Always stores a new Category value.

        Args:
            category_id: Category to update.
            **changes: Category fields to replace.

        Returns:
            The new category.

        Raises:
            PreconditionViolation: If the changes break a category invariant.
        """
        if changes.get("id", category_id) is not category_id:
            raise PreconditionViolation("A category's id cannot be changed")
        updated = replace(self._job_state[category_id], **changes)
        self._commit(updated)
        return updated

    async def add_note(self, category_id: CategoryId, source: NoteSource) -> NoteOutcome:
        """Submit a typed or recorded note to a category.

        Returns:
            NoteOutcome. No note is created if no content was detected.

        Raises:
            CategoryBusyError: If the category already has a request in flight.
            JobResetError: If the job was reset before extraction finished.
            InferenceError: If extraction fails. The job state is unchanged.
        """
        with self._busy(category_id):
            generation = self._generation
            outcome = await self._state_machine.add_note(self._job_state[category_id], source)
            self._ensure_generation(generation)
            if not outcome.no_content:
                self._commit(outcome.category)
            return outcome

    def delete_note(self, category_id: CategoryId, note_id: str) -> Category:
        """Delete a note from a category.

        Raises:
            CategoryBusyError: If the category has a request in flight.
            NoteNotFoundError: If no note has that id.
        """
        if self.is_processing(category_id):
            raise CategoryBusyError()
        updated = self._state_machine.remove_note(self._job_state[category_id], note_id)
        self._commit(updated)
        return updated

    async def finalize_category(self, category_id: CategoryId) -> Category:
        """Validate a category and mark it complete if it passes.

        A completed category closes and returns to the dashboard.

        Raises:
            CategoryBusyError: If the category already has a request in flight.
            PreconditionViolation: If a required category has no notes.
            JobResetError: If the job was reset before validation finished.
            InferenceError: If validation fails. The job state is unchanged.
        """
        with self._busy(category_id):
            generation = self._generation
            updated = await self._state_machine.finalize(self._job_state[category_id])
            self._ensure_generation(generation)
            self._commit(updated)

        if updated.is_complete and self._active_category is category_id:
            self.back_to_dashboard()
        return updated

    async def finish_job(self) -> FieldReport:
        """Generate the final report and switch to the report view.

        Raises:
            PreconditionViolation: If a required category is incomplete or a
                report is already being generated.
            JobResetError: If the job was reset before the report was ready.
            InferenceError: If report generation fails.
        """
        if self._generating_report:
            raise PreconditionViolation("The report is already being generated")
        if not self.is_job_complete:
            raise PreconditionViolation(
                "Cannot finish job, incomplete sections: "
                + ", ".join(c.value for c in self._job_state.incomplete_required())
            )

        generation = self._generation
        self._generating_report = True
        try:
            report = await self._aggregator.finish(self._job_state)
        finally:
            self._generating_report = False
        self._ensure_generation(generation)

        self._report = report
        self._active_category = None
        self._view = AppView.REPORT
        return report

    def reset(self) -> None:
        """Discard the job and report and start over.

        Requests still in flight for the discarded job finish without
        writing anything back.
        """
        self._generation += 1
        self._job_state = JobState.initial()
        self._report = None
        self._active_category = None
        self._view = AppView.DASHBOARD
        logger.info("Session reset")

    def _commit(self, category: Category) -> None:
        self._job_state = self._job_state.with_category(category)
        logger.debug(
            f"{category.id.value} updated: status={category.status.value}, "
            f"notes={len(category.notes)}, job_complete={self._job_state.is_job_complete}"
        )

    def _ensure_generation(self, generation: int) -> None:
        if generation != self._generation:
            logger.info("Dropping result of a request started before the last reset")
            raise JobResetError()

    @contextmanager
    def _busy(self, category_id: CategoryId) -> Iterator[None]:
        if category_id in self._processing:
            raise CategoryBusyError()
        self._processing.add(category_id)
        try:
            yield
        finally:
            self._processing.discard(category_id)


__all__ = ["AppView", "SessionController"]
