"""Data models for category tracking.

Defines the Note, Category and JobState values. All three are immutable;
updates produce new values so observers can detect change by identity.
"""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from ..errors import PreconditionViolation
from .catalog import spec_for
from .ids import REQUIRED_CATEGORIES, CategoryId, CategoryStatus
from .schemas import CategoryData, empty_data


def new_note_id() -> str:
    """Generate a unique note identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Note:
    """A captured field note.

    Attributes:
        text: Final transcript of the note
        id: Unique note identifier
        timestamp: When the note was created
    """

    text: str
    id: str = field(default_factory=new_note_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class Category:
    """State of one report category.

    Attributes:
        id: Fixed category identifier
        title: Display label
        status: Completion status
        notes: Notes in chronological order
        data: Structured data extracted so far
        missing_info: Reasons the category is not yet complete
    """

    id: CategoryId
    title: str
    status: CategoryStatus = CategoryStatus.NOT_STARTED
    notes: tuple[Note, ...] = ()
    data: CategoryData | None = None
    missing_info: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "notes", tuple(self.notes))
        object.__setattr__(self, "missing_info", tuple(self.missing_info))
        if self.data is None:
            object.__setattr__(self, "data", empty_data(self.id))

        if self.data.category_id is not self.id:
            raise PreconditionViolation(
                f"{self.data.category_id.value} data cannot be stored in {self.id.value}"
            )
        if self.status is CategoryStatus.COMPLETE and self.missing_info:
            raise PreconditionViolation(
                f"{self.id.value} cannot be complete while information is missing"
            )
        if self.status is CategoryStatus.NOT_STARTED and (
            self.notes or not self.data.is_empty()
        ):
            raise PreconditionViolation(
                f"{self.id.value} cannot be not_started with notes or data"
            )

    @classmethod
    def initial(cls, category_id: CategoryId) -> "Category":
        """Create the untouched state for a category."""
        return cls(id=category_id, title=spec_for(category_id).title)

    @property
    def is_complete(self) -> bool:
        """Return True if the category has been finalized."""
        return self.status is CategoryStatus.COMPLETE

    def find_note(self, note_id: str) -> Note | None:
        """Get a note by id, or None if absent."""
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "id": self.id.value,
            "title": self.title,
            "status": self.status.value,
            "notes": [note.to_dict() for note in self.notes],
            "data": self.data.to_dict(),
            "missing_info": list(self.missing_info),
        }


@dataclass(frozen=True)
class JobState:
    """Complete set of categories for one job.

    The mapping always holds exactly one Category per CategoryId.
    """

    categories: Mapping[CategoryId, Category]

    def __post_init__(self) -> None:
        missing = [c.value for c in CategoryId if c not in self.categories]
        if missing or len(self.categories) != len(CategoryId):
            raise PreconditionViolation(f"Job state must cover every category, missing {missing}")
        for category_id, category in self.categories.items():
            if category.id is not category_id:
                raise PreconditionViolation(
                    f"Category {category.id.value} stored under {category_id.value}"
                )
        object.__setattr__(self, "categories", MappingProxyType(dict(self.categories)))

    @classmethod
    def initial(cls) -> "JobState":
        """Create the default eight-category job state."""
        return cls({category_id: Category.initial(category_id) for category_id in CategoryId})

    def __getitem__(self, category_id: CategoryId) -> Category:
        return self.categories[category_id]

    @property
    def is_job_complete(self) -> bool:
        """Return True if every required category is complete."""
        return not self.incomplete_required()

    def incomplete_required(self) -> list[CategoryId]:
        """Get required categories that are not yet complete."""
        return [c for c in REQUIRED_CATEGORIES if not self.categories[c].is_complete]

    def with_category(self, category: Category) -> "JobState":
        """Return a new job state with one category replaced."""
        updated = dict(self.categories)
        updated[category.id] = category
        return JobState(updated)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "categories": {c.value: self.categories[c].to_dict() for c in CategoryId},
            "is_job_complete": self.is_job_complete,
        }


__all__ = ["Category", "JobState", "Note", "new_note_id"]
