"""Category identifiers and statuses."""

from enum import Enum


class CategoryId(Enum):
    """The eight fixed report categories."""

    PROJECT_DETAILS = "project_details"
    ENV_SAFETY = "env_safety"
    SURVEY_INVENTORY = "survey_inventory"
    SITE_RECORDING = "site_recording"
    EXCAVATIONS = "excavations"
    FINDS = "finds"
    CONDITION_FOLLOWUP = "condition_followup"
    ADDITIONAL_NOTES = "additional_notes"

    @property
    def is_optional(self) -> bool:
        """Return True for the category that may be finalized empty."""
        return self is OPTIONAL_CATEGORY


class CategoryStatus(Enum):
    """Completion status of a category."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


OPTIONAL_CATEGORY = CategoryId.ADDITIONAL_NOTES

REQUIRED_CATEGORIES: tuple[CategoryId, ...] = tuple(
    category_id for category_id in CategoryId if category_id is not OPTIONAL_CATEGORY
)


__all__ = ["CategoryId", "CategoryStatus", "OPTIONAL_CATEGORY", "REQUIRED_CATEGORIES"]
