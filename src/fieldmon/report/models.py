"""Final field report structure.

The FieldReport has a fixed shape independent of the live job state: one
record per report section.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ..errors import SchemaError

SECTIONS = (
    "project_meta",
    "env_safety",
    "survey_inventory",
    "site_recording",
    "excavations",
    "finds",
    "condition_assessment",
    "daily_log",
)


def _text(section: str, value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SchemaError(f"Report section '{section}' must be text, got {type(value).__name__}")
    return value.strip()


def _object(section: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"Report section '{section}' must be an object")
    return value


@dataclass(frozen=True)
class ProjectMeta:
    """Project identification block."""

    project_name: str = ""
    date: str = ""
    location: str = ""
    monitor_name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectMeta":
        data = _object("project_meta", data)
        return cls(
            project_name=_text("project_meta.project_name", data.get("project_name")),
            date=_text("project_meta.date", data.get("date")),
            location=_text("project_meta.location", data.get("location")),
            monitor_name=_text("project_meta.monitor_name", data.get("monitor_name")),
        )


@dataclass(frozen=True)
class SurveyItem:
    """One row of the survey inventory table."""

    item: str
    description: str = ""


@dataclass(frozen=True)
class ConditionAssessment:
    """Site condition and follow-up recommendations."""

    condition: str = ""
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class FieldReport:
    """Consolidated report produced once per finished job.

    Attributes:
        project_meta: Project identification block
        env_safety: Environment and safety narrative
        survey_inventory: Tabular survey observations
        site_recording: Summary of recorded features
        excavations: Summary of excavation work
        finds: Summary of cultural finds
        condition_assessment: Site condition and recommendations
        daily_log: Chronological log of the day
        generated_at: When the report was generated
    """

    project_meta: ProjectMeta
    env_safety: str
    survey_inventory: tuple[SurveyItem, ...]
    site_recording: str
    excavations: str
    finds: str
    condition_assessment: ConditionAssessment
    daily_log: str
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_dict(cls, data: Any) -> "FieldReport":
        """Build a report from the backend's JSON reply.

        Raises:
            SchemaError: If a section is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise SchemaError("Report must be an object")
        missing = [section for section in SECTIONS if section not in data]
        if missing:
            raise SchemaError(f"Report is missing sections: {', '.join(missing)}")

        rows = data["survey_inventory"]
        if not isinstance(rows, list):
            raise SchemaError("Report section 'survey_inventory' must be a list")
        survey_items = []
        for row in rows:
            row = _object("survey_inventory", row)
            survey_items.append(
                SurveyItem(
                    item=_text("survey_inventory.item", row.get("item")),
                    description=_text("survey_inventory.description", row.get("description")),
                )
            )

        condition = _object("condition_assessment", data["condition_assessment"])
        recommendations = condition.get("recommendations") or []
        if not isinstance(recommendations, list):
            raise SchemaError("condition_assessment.recommendations must be a list")

        return cls(
            project_meta=ProjectMeta.from_dict(data["project_meta"]),
            env_safety=_text("env_safety", data["env_safety"]),
            survey_inventory=tuple(survey_items),
            site_recording=_text("site_recording", data["site_recording"]),
            excavations=_text("excavations", data["excavations"]),
            finds=_text("finds", data["finds"]),
            condition_assessment=ConditionAssessment(
                condition=_text("condition_assessment.condition", condition.get("condition")),
                recommendations=tuple(
                    _text("condition_assessment.recommendations", r) for r in recommendations
                ),
            ),
            daily_log=_text("daily_log", data["daily_log"]),
        )

    @staticmethod
    def json_schema() -> dict[str, Any]:
        """JSON Schema describing the report for structured output."""
        text = {"type": "string"}
        return {
            "type": "object",
            "properties": {
                "project_meta": {
                    "type": "object",
                    "properties": {
                        "project_name": text,
                        "date": text,
                        "location": text,
                        "monitor_name": text,
                    },
                },
                "env_safety": {"type": "string", "description": "Full paragraph summary"},
                "survey_inventory": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"item": text, "description": text},
                    },
                },
                "site_recording": {"type": "string", "description": "Summary of features"},
                "excavations": {"type": "string", "description": "Summary of excavation work"},
                "finds": {"type": "string", "description": "Summary of cultural finds"},
                "condition_assessment": {
                    "type": "object",
                    "properties": {
                        "condition": text,
                        "recommendations": {"type": "array", "items": text},
                    },
                },
                "daily_log": {"type": "string", "description": "Chronological log"},
            },
            "required": list(SECTIONS),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape plus generation time."""
        return {
            "project_meta": {
                "project_name": self.project_meta.project_name,
                "date": self.project_meta.date,
                "location": self.project_meta.location,
                "monitor_name": self.project_meta.monitor_name,
            },
            "env_safety": self.env_safety,
            "survey_inventory": [
                {"item": row.item, "description": row.description}
                for row in self.survey_inventory
            ],
            "site_recording": self.site_recording,
            "excavations": self.excavations,
            "finds": self.finds,
            "condition_assessment": {
                "condition": self.condition_assessment.condition,
                "recommendations": list(self.condition_assessment.recommendations),
            },
            "daily_log": self.daily_log,
            "generated_at": self.generated_at.isoformat(),
        }

    def to_markdown(self) -> str:
        """Render the report as a plain markdown document."""
        meta = self.project_meta
        lines = [
            f"# Daily Monitoring Report: {meta.project_name or 'Untitled project'}",
            "",
            f"- **Date:** {meta.date or 'n/a'}",
            f"- **Location:** {meta.location or 'n/a'}",
            f"- **Monitor:** {meta.monitor_name or 'n/a'}",
            "",
            "## Environmental & Safety Conditions",
            self.env_safety or "No entry.",
            "",
            "## Survey & Inventory",
        ]
        if self.survey_inventory:
            lines.append("| Item | Description |")
            lines.append("| --- | --- |")
            for row in self.survey_inventory:
                lines.append(f"| {row.item} | {row.description} |")
        else:
            lines.append("No entries.")
        lines += [
            "",
            "## Site Recording",
            self.site_recording or "No entry.",
            "",
            "## Excavations",
            self.excavations or "No entry.",
            "",
            "## Finds & Materials",
            self.finds or "No entry.",
            "",
            "## Condition Assessment",
            self.condition_assessment.condition or "No entry.",
        ]
        for recommendation in self.condition_assessment.recommendations:
            lines.append(f"- {recommendation}")
        lines += ["", "## Daily Log", self.daily_log or "No entry.", ""]
        return "\n".join(lines)


__all__ = [
    "ConditionAssessment",
    "FieldReport",
    "ProjectMeta",
    "SECTIONS",
    "SurveyItem",
]
