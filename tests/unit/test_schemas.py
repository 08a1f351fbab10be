"""Unit tests for per-category structured data."""

import pytest

from fieldmon.categories import (
    DATA_TYPES,
    AdditionalNotesData,
    CategoryId,
    EnvSafetyData,
    FindsData,
    SurveyInventoryData,
    empty_data,
    parse_data,
)
from fieldmon.errors import SchemaError


class TestDataRegistry:
    """Tests for the category to record-type registry."""

    def test_every_category_has_a_record_type(self) -> None:
        assert set(DATA_TYPES) == set(CategoryId)

    def test_record_types_are_tagged_with_their_category(self) -> None:
        for category_id, data_type in DATA_TYPES.items():
            assert data_type.category_id is category_id

    def test_empty_data_is_empty(self) -> None:
        for category_id in CategoryId:
            data = empty_data(category_id)
            assert data.is_empty()
            assert data.to_dict() == {}


class TestFromDict:
    """Tests for parsing backend payloads."""

    def test_parses_string_fields(self) -> None:
        data = parse_data(CategoryId.FINDS, {"item_type": "lithic", "quantity": "1"})
        assert data == FindsData(item_type="lithic", quantity="1")

    def test_coerces_numbers_to_strings(self) -> None:
        data = parse_data(CategoryId.FINDS, {"quantity": 3})
        assert data.quantity == "3"

    def test_ignores_unknown_keys(self) -> None:
        data = parse_data(CategoryId.FINDS, {"item_type": "lithic", "weather": "sunny"})
        assert data.to_dict() == {"item_type": "lithic"}

    def test_blank_strings_are_unset(self) -> None:
        data = parse_data(CategoryId.FINDS, {"material": "   "})
        assert data.material is None

    def test_parses_string_lists(self) -> None:
        data = parse_data(CategoryId.ENV_SAFETY, {"safety_hazards": ["trench", "heat"]})
        assert data == EnvSafetyData(safety_hazards=("trench", "heat"))

    def test_single_string_becomes_list(self) -> None:
        data = parse_data(CategoryId.ENV_SAFETY, {"safety_hazards": "none"})
        assert data.safety_hazards == ("none",)

    def test_parses_booleans(self) -> None:
        data = parse_data(CategoryId.SURVEY_INVENTORY, {"nothing_found": True})
        assert data == SurveyInventoryData(nothing_found=True)

    def test_none_payload_is_empty(self) -> None:
        assert parse_data(CategoryId.FINDS, None) == FindsData()

    def test_rejects_non_object(self) -> None:
        with pytest.raises(SchemaError):
            parse_data(CategoryId.FINDS, ["lithic"])

    def test_rejects_object_for_string_field(self) -> None:
        with pytest.raises(SchemaError):
            parse_data(CategoryId.FINDS, {"material": {"kind": "obsidian"}})

    def test_rejects_boolean_for_string_field(self) -> None:
        with pytest.raises(SchemaError):
            parse_data(CategoryId.FINDS, {"quantity": True})

    def test_rejects_string_for_boolean_field(self) -> None:
        with pytest.raises(SchemaError):
            parse_data(CategoryId.SURVEY_INVENTORY, {"nothing_found": "yes"})


class TestToDict:
    """Tests for serialization."""

    def test_omits_unset_fields(self) -> None:
        assert FindsData(item_type="lithic").to_dict() == {"item_type": "lithic"}

    def test_lists_serialize_as_lists(self) -> None:
        data = AdditionalNotesData(context_points=("gate blocked",))
        assert data.to_dict() == {"context_points": ["gate blocked"]}

    def test_false_boolean_is_kept(self) -> None:
        assert SurveyInventoryData(nothing_found=False).to_dict() == {"nothing_found": False}


class TestJsonSchema:
    """Tests for generated JSON Schemas."""

    def test_finds_schema(self) -> None:
        schema = FindsData.json_schema()
        assert schema["type"] == "object"
        assert set(schema["properties"]) == {"item_type", "material", "quantity", "description"}
        assert schema["properties"]["item_type"] == {"type": "string"}

    def test_list_and_boolean_fields(self) -> None:
        properties = SurveyInventoryData.json_schema()["properties"]
        assert properties["items_observed"] == {"type": "array", "items": {"type": "string"}}
        assert properties["nothing_found"] == {"type": "boolean"}
