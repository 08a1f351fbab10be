"""Per-category structured data.

Each category carries its own record type with an explicit field set. The
same definitions drive parsing of backend replies, the JSON Schema sent to
the backend, and serialization back to plain dicts.
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, get_args, get_type_hints

from ..errors import SchemaError
from .ids import CategoryId

_STRING = "string"
_STRING_LIST = "array"
_BOOLEAN = "boolean"


def _field_kind(hint: Any) -> str:
    if hint == tuple[str, ...]:
        return _STRING_LIST
    if bool in get_args(hint):
        return _BOOLEAN
    return _STRING


def _coerce_string(name: str, value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise SchemaError(f"Field '{name}' must be a string, got boolean")
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        raise SchemaError(f"Field '{name}' must be a string, got {type(value).__name__}")
    return value.strip() or None


def _coerce_string_list(name: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise SchemaError(f"Field '{name}' must be a list, got {type(value).__name__}")
    items = []
    for item in value:
        text = _coerce_string(name, item)
        if text is not None:
            items.append(text)
    return tuple(items)


def _coerce_boolean(name: str, value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    raise SchemaError(f"Field '{name}' must be a boolean, got {type(value).__name__}")


_COERCERS = {
    _STRING: _coerce_string,
    _STRING_LIST: _coerce_string_list,
    _BOOLEAN: _coerce_boolean,
}


@dataclass(frozen=True)
class CategoryData:
    """Base class for per-category structured data records."""

    category_id: ClassVar[CategoryId]

    @classmethod
    def field_kinds(cls) -> dict[str, str]:
        """Map each field name to its JSON type."""
        hints = get_type_hints(cls)
        return {f.name: _field_kind(hints[f.name]) for f in fields(cls)}

    @classmethod
    def from_dict(cls, payload: Any) -> "CategoryData":
        """Build a record from a JSON-like mapping.

        Unknown keys are ignored. Numbers are accepted for string fields.

        Raises:
            SchemaError: If the payload or a known field has the wrong type.
        """
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise SchemaError(
                f"{cls.category_id.value} data must be an object, got {type(payload).__name__}"
            )
        values = {
            name: _COERCERS[kind](name, payload.get(name))
            for name, kind in cls.field_kinds().items()
        }
        return cls(**values)

    @classmethod
    def json_schema(cls) -> dict[str, Any]:
        """JSON Schema describing this record for structured output."""
        properties: dict[str, Any] = {}
        for name, kind in cls.field_kinds().items():
            if kind == _STRING_LIST:
                properties[name] = {"type": "array", "items": {"type": "string"}}
            else:
                properties[name] = {"type": kind}
        return {"type": "object", "properties": properties}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict, omitting unset fields."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value == ():
                continue
            result[f.name] = list(value) if isinstance(value, tuple) else value
        return result

    def is_empty(self) -> bool:
        """Return True if no field is set."""
        return not self.to_dict()


@dataclass(frozen=True)
class ProjectDetailsData(CategoryData):
    category_id: ClassVar[CategoryId] = CategoryId.PROJECT_DETAILS

    project_name: str | None = None
    project_number: str | None = None
    date: str | None = None
    monitor_name: str | None = None
    location: str | None = None


@dataclass(frozen=True)
class EnvSafetyData(CategoryData):
    category_id: ClassVar[CategoryId] = CategoryId.ENV_SAFETY

    weather: str | None = None
    temperature: str | None = None
    visibility: str | None = None
    safety_hazards: tuple[str, ...] = ()
    ppe_used: str | None = None
    ground_disturbances: str | None = None


@dataclass(frozen=True)
class SurveyInventoryData(CategoryData):
    category_id: ClassVar[CategoryId] = CategoryId.SURVEY_INVENTORY

    survey_method: str | None = None
    area_surveyed: str | None = None
    items_observed: tuple[str, ...] = ()
    nothing_found: bool | None = None


@dataclass(frozen=True)
class SiteRecordingData(CategoryData):
    category_id: ClassVar[CategoryId] = CategoryId.SITE_RECORDING

    features_observed: str | None = None
    dimensions: str | None = None
    colors_materials: str | None = None
    association: str | None = None


@dataclass(frozen=True)
class ExcavationsData(CategoryData):
    category_id: ClassVar[CategoryId] = CategoryId.EXCAVATIONS

    excavation_method: str | None = None
    depth: str | None = None
    soil_type: str | None = None
    stratigraphy: str | None = None


@dataclass(frozen=True)
class FindsData(CategoryData):
    category_id: ClassVar[CategoryId] = CategoryId.FINDS

    item_type: str | None = None
    material: str | None = None
    quantity: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class ConditionFollowupData(CategoryData):
    category_id: ClassVar[CategoryId] = CategoryId.CONDITION_FOLLOWUP

    site_condition: str | None = None
    disturbances: str | None = None
    actions_taken: str | None = None
    recommendations: str | None = None


@dataclass(frozen=True)
class AdditionalNotesData(CategoryData):
    category_id: ClassVar[CategoryId] = CategoryId.ADDITIONAL_NOTES

    notes_summary: str | None = None
    context_points: tuple[str, ...] = ()


DATA_TYPES: dict[CategoryId, type[CategoryData]] = {
    data_type.category_id: data_type
    for data_type in (
        ProjectDetailsData,
        EnvSafetyData,
        SurveyInventoryData,
        SiteRecordingData,
        ExcavationsData,
        FindsData,
        ConditionFollowupData,
        AdditionalNotesData,
    )
}


def data_type_for(category_id: CategoryId) -> type[CategoryData]:
    """Get the record type for a category."""
    return DATA_TYPES[category_id]


def empty_data(category_id: CategoryId) -> CategoryData:
    """Create an empty record for a category."""
    return DATA_TYPES[category_id]()


def parse_data(category_id: CategoryId, payload: Any) -> CategoryData:
    """Parse a JSON-like payload into the category's record type.

    Raises:
        SchemaError: If the payload does not fit the category's schema.
    """
    return DATA_TYPES[category_id].from_dict(payload)


__all__ = [
    "AdditionalNotesData",
    "CategoryData",
    "ConditionFollowupData",
    "DATA_TYPES",
    "EnvSafetyData",
    "ExcavationsData",
    "FindsData",
    "ProjectDetailsData",
    "SiteRecordingData",
    "SurveyInventoryData",
    "data_type_for",
    "empty_data",
    "parse_data",
]
