"""Unit tests for the category state machine."""

from dataclasses import replace

import pytest

from fieldmon.categories import Category, CategoryId, CategoryStatus, FindsData
from fieldmon.errors import NetworkError, PreconditionViolation
from fieldmon.inference import (
    NO_CONTENT_TRANSCRIPT,
    InferenceGateway,
    MockInferenceBackend,
    RetryPolicy,
    TextNote,
)
from fieldmon.workflow import CategoryStateMachine


@pytest.fixture
def backend() -> MockInferenceBackend:
    return MockInferenceBackend()


@pytest.fixture
def machine(backend: MockInferenceBackend) -> CategoryStateMachine:
    gateway = InferenceGateway(backend, retry_policy=RetryPolicy(base_delay_seconds=0.0))
    return CategoryStateMachine(gateway)


def extraction(transcript: str, data: dict) -> dict:
    return {"transcript": transcript, "updatedData": data}


class TestAddNote:
    """Tests for CategoryStateMachine.add_note."""

    @pytest.mark.asyncio
    async def test_first_note_starts_category(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        """Test a lithic find is captured on a fresh category."""
        backend.queue_response(
            extraction("Found one lithic flake", {"item_type": "lithic", "quantity": "1"})
        )

        outcome = await machine.add_note(
            Category.initial(CategoryId.FINDS), TextNote("Found one lithic flake")
        )

        category = outcome.category
        assert category.status is CategoryStatus.IN_PROGRESS
        assert len(category.notes) == 1
        assert category.notes[0] is outcome.note
        assert category.data.to_dict() == {"item_type": "lithic", "quantity": "1"}

    @pytest.mark.asyncio
    async def test_second_note_merges_data(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        backend.queue_response(extraction("lithic flake", {"item_type": "lithic", "quantity": "1"}))
        backend.queue_response(
            extraction(
                "It is obsidian",
                {"item_type": "lithic", "quantity": "1", "material": "obsidian"},
            )
        )

        first = await machine.add_note(Category.initial(CategoryId.FINDS), TextNote("lithic flake"))
        second = await machine.add_note(first.category, TextNote("It is obsidian"))

        assert len(second.category.notes) == 2
        assert second.category.data == FindsData(
            item_type="lithic", quantity="1", material="obsidian"
        )

    @pytest.mark.asyncio
    async def test_no_content_leaves_category_unchanged(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        backend.queue_response(extraction(NO_CONTENT_TRANSCRIPT, {}))
        category = Category.initial(CategoryId.FINDS)

        outcome = await machine.add_note(category, TextNote("mumble"))

        assert outcome.no_content
        assert outcome.note is None
        assert outcome.category is category

    @pytest.mark.asyncio
    async def test_note_reopens_complete_category(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        backend.queue_response(extraction("one", {"item_type": "lithic"}))
        backend.queue_response(extraction("two", {"item_type": "lithic", "material": "chert"}))
        outcome = await machine.add_note(Category.initial(CategoryId.FINDS), TextNote("one"))
        done = replace(outcome.category, status=CategoryStatus.COMPLETE)

        reopened = await machine.add_note(done, TextNote("two"))

        assert reopened.category.status is CategoryStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_failed_extraction_changes_nothing(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        backend.queue_error(NetworkError("offline"))
        category = Category.initial(CategoryId.FINDS)

        with pytest.raises(NetworkError):
            await machine.add_note(category, TextNote("one"))

        assert category.status is CategoryStatus.NOT_STARTED


class TestRemoveNote:
    """Tests for CategoryStateMachine.remove_note."""

    @pytest.mark.asyncio
    async def test_remove_last_note(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        backend.queue_response(extraction("one", {"item_type": "lithic"}))
        outcome = await machine.add_note(Category.initial(CategoryId.FINDS), TextNote("one"))

        category = machine.remove_note(outcome.category, outcome.note.id)

        assert category.status is CategoryStatus.NOT_STARTED
        assert category.notes == ()


class TestFinalize:
    """Tests for CategoryStateMachine.finalize."""

    @staticmethod
    async def lithic(machine: CategoryStateMachine, backend: MockInferenceBackend) -> Category:
        """Build a finds category with one note and no material."""
        backend.queue_response(extraction("one flake", {"item_type": "lithic", "quantity": "1"}))
        outcome = await machine.add_note(Category.initial(CategoryId.FINDS), TextNote("one flake"))
        return outcome.category

    @pytest.mark.asyncio
    async def test_incomplete_keeps_in_progress(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        """Test missing material keeps the category open."""
        lithic = await self.lithic(machine, backend)
        backend.queue_response({"isComplete": False, "missingInfo": ["material"]})

        category = await machine.finalize(lithic)

        assert category.status is CategoryStatus.IN_PROGRESS
        assert category.missing_info == ("material",)

    @pytest.mark.asyncio
    async def test_complete_clears_missing_info(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        lithic = await self.lithic(machine, backend)
        backend.queue_response({"isComplete": False, "missingInfo": ["material"]})
        backend.queue_response({"isComplete": True, "missingInfo": []})

        category = await machine.finalize(lithic)
        category = await machine.finalize(category)

        assert category.status is CategoryStatus.COMPLETE
        assert category.missing_info == ()

    @pytest.mark.asyncio
    async def test_finalizing_complete_category_is_noop(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        lithic = await self.lithic(machine, backend)
        backend.queue_response({"isComplete": True, "missingInfo": []})
        category = await machine.finalize(lithic)
        calls = backend.call_count

        again = await machine.finalize(category)

        assert again is category
        assert backend.call_count == calls

    @pytest.mark.asyncio
    async def test_required_category_without_notes_raises(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        with pytest.raises(PreconditionViolation):
            await machine.finalize(Category.initial(CategoryId.FINDS))
        assert backend.call_count == 0

    @pytest.mark.asyncio
    async def test_optional_category_without_notes_completes(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        """Test additional notes may be finalized empty."""
        category = await machine.finalize(Category.initial(CategoryId.ADDITIONAL_NOTES))

        assert category.status is CategoryStatus.COMPLETE
        assert category.notes == ()
        assert backend.call_count == 0

    @pytest.mark.asyncio
    async def test_failed_validation_changes_nothing(
        self, machine: CategoryStateMachine, backend: MockInferenceBackend
    ) -> None:
        lithic = await self.lithic(machine, backend)
        backend.queue_error(NetworkError("offline"))

        with pytest.raises(NetworkError):
            await machine.finalize(lithic)

        assert lithic.status is CategoryStatus.IN_PROGRESS
