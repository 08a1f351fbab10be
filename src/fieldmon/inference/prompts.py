"""Prompt templates for extraction, validation and report generation."""

import json
from collections.abc import Mapping
from typing import Any

from ..categories import OPTIONAL_CATEGORY, Category, CategoryData, CategoryId, spec_for
from .model import NO_CONTENT_TRANSCRIPT

EXTRACT_SCHEMA_NAME = "extract_note"
VALIDATE_SCHEMA_NAME = "validate_category"
REPORT_SCHEMA_NAME = "field_report"

SYSTEM_PROMPT = """You are an AI assistant for a Cultural Resources Field Monitor.

IMPORTANT GUIDELINES:
- Only record information that is actually present in the input
- Never invent names, places, numbers or findings
- Keep technical vocabulary as spoken (e.g., lithic, debitage, stratigraphy)
- Always answer by calling the provided tool with schema-conformant data"""

EXTRACTION_PROMPT = """TASK:
1. Analyze the note provided below.
2. If the note is empty, just noise, or unintelligible, return "{sentinel}" as the transcript and return the EXISTING DATA unchanged.
3. Otherwise return the note text as the transcript, exactly as given.
4. Extract relevant technical data for the category: "{category}".
5. Merge this new data with the EXISTING DATA. Keep existing values unless the note corrects them.

NEW NOTE: "{text}"

EXISTING DATA: {existing}"""

VALIDATION_PROMPT = """Review the following data collected for the category: "{category}" by a Field Monitor.

DATA: {data}

Your goal: determine whether enough information has been provided to mark this SPECIFIC section as complete.

CRITERIA FOR COMPLETION (use ONLY these criteria):
{criteria}

INSTRUCTIONS:
1. Check if the DATA satisfies the criteria above.
2. If satisfied, 'isComplete' is true and 'missingInfo' is empty.
3. If NOT satisfied, 'isComplete' is false, and list the missing items in 'missingInfo'.
4. DO NOT ask for information that belongs in other sections. Only ask for missing info relevant to '{category}'."""

REPORT_PROMPT = """Generate a final Cultural Resources Field Report based on the following job data.
Structure the output to map exactly to the required schema. Use a formal, professional tone.

JOB DATA: {job_data}

SUPPLEMENTAL CONTEXT (use this to refine all sections):
{supplemental}

INSTRUCTIONS:
- If the supplemental context contains relevant details for survey, finds, or safety, incorporate them into those sections.
- Ensure the daily_log is chronological and detailed."""


def extraction_schema(data_schema: dict[str, Any]) -> dict[str, Any]:
    """Wrap a category data schema in the extraction reply schema."""
    return {
        "type": "object",
        "properties": {
            "transcript": {"type": "string"},
            "updatedData": data_schema,
        },
        "required": ["transcript", "updatedData"],
    }


VALIDATION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "isComplete": {"type": "boolean"},
        "missingInfo": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["isComplete", "missingInfo"],
}


def build_extraction_prompt(text: str, category_id: CategoryId, prior: CategoryData) -> str:
    """Build the prompt that extracts and merges data from one note."""
    return EXTRACTION_PROMPT.format(
        sentinel=NO_CONTENT_TRANSCRIPT,
        category=category_id.value,
        text=text,
        existing=json.dumps(prior.to_dict()),
    )


def build_validation_prompt(category_id: CategoryId, data: CategoryData) -> str:
    """Build the prompt that checks one category against its checklist."""
    return VALIDATION_PROMPT.format(
        category=category_id.value,
        data=json.dumps(data.to_dict()),
        criteria=spec_for(category_id).checklist,
    )


def build_report_prompt(categories: Mapping[CategoryId, Category]) -> str:
    """Build the prompt that aggregates every category into the final report."""
    job_data = {
        category_id.value: {
            "title": category.title,
            "status": category.status.value,
            "data": category.data.to_dict(),
            "notes": [note.text for note in category.notes],
        }
        for category_id, category in categories.items()
    }
    supplemental = "\n".join(note.text for note in categories[OPTIONAL_CATEGORY].notes)
    return REPORT_PROMPT.format(
        job_data=json.dumps(job_data),
        supplemental=supplemental or "None",
    )


__all__ = [
    "EXTRACTION_PROMPT",
    "EXTRACT_SCHEMA_NAME",
    "REPORT_SCHEMA_NAME",
    "REPORT_PROMPT",
    "SYSTEM_PROMPT",
    "VALIDATE_SCHEMA_NAME",
    "VALIDATION_PROMPT",
    "VALIDATION_SCHEMA",
    "build_extraction_prompt",
    "build_report_prompt",
    "build_validation_prompt",
    "extraction_schema",
]
