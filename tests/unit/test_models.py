"""Unit tests for category and job state models."""

from dataclasses import FrozenInstanceError, replace

import pytest

from fieldmon.categories import (
    REQUIRED_CATEGORIES,
    Category,
    CategoryId,
    CategoryStatus,
    EnvSafetyData,
    FindsData,
    JobState,
    Note,
    spec_for,
)
from fieldmon.errors import PreconditionViolation


def complete(category_id: CategoryId) -> Category:
    """Build a complete category with one note."""
    return replace(
        Category.initial(category_id),
        status=CategoryStatus.COMPLETE,
        notes=(Note(text="done"),),
    )


class TestNote:
    """Tests for Note."""

    def test_ids_are_unique(self) -> None:
        assert Note(text="a").id != Note(text="a").id

    def test_to_dict(self) -> None:
        note = Note(text="Found a flake", id="n1")
        result = note.to_dict()
        assert result["id"] == "n1"
        assert result["text"] == "Found a flake"
        assert "timestamp" in result


class TestCategory:
    """Tests for Category invariants."""

    def test_initial_state(self) -> None:
        """Test the untouched category."""
        category = Category.initial(CategoryId.FINDS)

        assert category.title == spec_for(CategoryId.FINDS).title
        assert category.status is CategoryStatus.NOT_STARTED
        assert category.notes == ()
        assert category.data == FindsData()
        assert category.missing_info == ()

    def test_lists_are_stored_as_tuples(self) -> None:
        category = Category(
            id=CategoryId.FINDS,
            title="Finds",
            status=CategoryStatus.IN_PROGRESS,
            notes=[Note(text="one")],
            missing_info=["material"],
        )
        assert isinstance(category.notes, tuple)
        assert category.missing_info == ("material",)

    def test_is_immutable(self) -> None:
        category = Category.initial(CategoryId.FINDS)
        with pytest.raises(FrozenInstanceError):
            category.status = CategoryStatus.COMPLETE  # type: ignore[misc]

    def test_rejects_data_of_another_category(self) -> None:
        with pytest.raises(PreconditionViolation):
            Category(id=CategoryId.FINDS, title="Finds", data=EnvSafetyData())

    def test_complete_cannot_have_missing_info(self) -> None:
        with pytest.raises(PreconditionViolation):
            Category(
                id=CategoryId.FINDS,
                title="Finds",
                status=CategoryStatus.COMPLETE,
                notes=(Note(text="one"),),
                missing_info=("material",),
            )

    def test_not_started_cannot_have_notes(self) -> None:
        with pytest.raises(PreconditionViolation):
            Category(id=CategoryId.FINDS, title="Finds", notes=(Note(text="one"),))

    def test_not_started_cannot_have_data(self) -> None:
        with pytest.raises(PreconditionViolation):
            Category(id=CategoryId.FINDS, title="Finds", data=FindsData(material="chert"))

    def test_find_note(self) -> None:
        note = Note(text="one", id="n1")
        category = replace(
            Category.initial(CategoryId.FINDS),
            status=CategoryStatus.IN_PROGRESS,
            notes=(note,),
        )
        assert category.find_note("n1") is note
        assert category.find_note("missing") is None

    def test_to_dict(self) -> None:
        result = Category.initial(CategoryId.FINDS).to_dict()
        assert result["id"] == "finds"
        assert result["status"] == "not_started"
        assert result["notes"] == []
        assert result["data"] == {}


class TestJobState:
    """Tests for JobState."""

    def test_initial_has_every_category(self) -> None:
        """Test that the initial job covers all eight categories."""
        state = JobState.initial()
        assert set(state.categories) == set(CategoryId)
        assert all(c.status is CategoryStatus.NOT_STARTED for c in state.categories.values())

    def test_initial_is_not_complete(self) -> None:
        assert not JobState.initial().is_job_complete

    def test_rejects_missing_category(self) -> None:
        categories = dict(JobState.initial().categories)
        del categories[CategoryId.FINDS]
        with pytest.raises(PreconditionViolation):
            JobState(categories)

    def test_rejects_category_under_wrong_key(self) -> None:
        categories = dict(JobState.initial().categories)
        categories[CategoryId.FINDS] = Category.initial(CategoryId.EXCAVATIONS)
        with pytest.raises(PreconditionViolation):
            JobState(categories)

    def test_categories_mapping_is_read_only(self) -> None:
        state = JobState.initial()
        with pytest.raises(TypeError):
            state.categories[CategoryId.FINDS] = complete(CategoryId.FINDS)  # type: ignore[index]

    def test_with_category_returns_new_state(self) -> None:
        """Test that replacing a category leaves the original untouched."""
        state = JobState.initial()
        finds = complete(CategoryId.FINDS)

        updated = state.with_category(finds)

        assert updated is not state
        assert updated[CategoryId.FINDS] is finds
        assert state[CategoryId.FINDS].status is CategoryStatus.NOT_STARTED
        assert updated[CategoryId.EXCAVATIONS] is state[CategoryId.EXCAVATIONS]

    def test_complete_when_required_categories_complete(self) -> None:
        """Test that the optional category does not block completion."""
        state = JobState.initial()
        for category_id in REQUIRED_CATEGORIES:
            state = state.with_category(complete(category_id))

        assert state.is_job_complete
        assert state[CategoryId.ADDITIONAL_NOTES].status is CategoryStatus.NOT_STARTED

    def test_one_incomplete_required_category_blocks(self) -> None:
        state = JobState.initial()
        for category_id in REQUIRED_CATEGORIES[1:]:
            state = state.with_category(complete(category_id))

        assert not state.is_job_complete
        assert state.incomplete_required() == [REQUIRED_CATEGORIES[0]]

    def test_to_dict(self) -> None:
        result = JobState.initial().to_dict()
        assert list(result["categories"]) == [c.value for c in CategoryId]
        assert result["is_job_complete"] is False
