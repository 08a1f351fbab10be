"""Report categories for field monitoring jobs.

Provides category identifiers, per-category structured data, and the
immutable Note, Category and JobState values.
"""

from .catalog import CATALOG, CategorySpec, spec_for
from .ids import OPTIONAL_CATEGORY, REQUIRED_CATEGORIES, CategoryId, CategoryStatus
from .models import Category, JobState, Note, new_note_id
from .schemas import (
    DATA_TYPES,
    AdditionalNotesData,
    CategoryData,
    ConditionFollowupData,
    EnvSafetyData,
    ExcavationsData,
    FindsData,
    ProjectDetailsData,
    SiteRecordingData,
    SurveyInventoryData,
    data_type_for,
    empty_data,
    parse_data,
)

__all__ = [
    "AdditionalNotesData",
    "CATALOG",
    "Category",
    "CategoryData",
    "CategoryId",
    "CategorySpec",
    "CategoryStatus",
    "ConditionFollowupData",
    "DATA_TYPES",
    "EnvSafetyData",
    "ExcavationsData",
    "FindsData",
    "JobState",
    "Note",
    "OPTIONAL_CATEGORY",
    "ProjectDetailsData",
    "REQUIRED_CATEGORIES",
    "SiteRecordingData",
    "SurveyInventoryData",
    "data_type_for",
    "empty_data",
    "new_note_id",
    "parse_data",
    "spec_for",
]
