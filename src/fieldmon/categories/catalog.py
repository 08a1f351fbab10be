"""Static descriptions of the report categories.

Titles are shown to the field worker, guides and examples prompt the
dictation, and the completion checklist is what validation checks against.
"""

from dataclasses import dataclass

from .ids import CategoryId


@dataclass(frozen=True)
class CategorySpec:
    """Static description of one category.

    Attributes:
        title: Display label.
        guide: Topics the worker should cover.
        example: Sample dictation for the category.
        checklist: Facts required before the category counts as complete.
    """

    title: str
    guide: tuple[str, ...]
    example: str
    checklist: str


CATALOG: dict[CategoryId, CategorySpec] = {
    CategoryId.PROJECT_DETAILS: CategorySpec(
        title="Project & Location",
        guide=("Project Name & Number", "Date", "Specific Location / GPS", "Monitor Name"),
        example=(
            "My name is Sarah Chen. I am monitoring the Riverside Levee Improvement, "
            "project number 2023-45. Today's date is October 24th. I'm currently at "
            "the north access gate."
        ),
        checklist=(
            "CRITICAL: The 'Monitor Name' MUST be present. Project Name, Project Number, "
            "Date, and Specific Location are also required."
        ),
    ),
    CategoryId.ENV_SAFETY: CategorySpec(
        title="Env & Safety Conditions",
        guide=(
            "Weather (Sun, Cloud, Rain)",
            "Temperature",
            "Visibility Conditions",
            "Safety Hazards / PPE Used",
        ),
        example=(
            "Weather is clear and sunny, about 75 degrees. Visibility is excellent. "
            "PPE includes hard hat, vest, and boots. No immediate hazards observed."
        ),
        checklist="Weather conditions, Visibility, Safety hazards (or 'none'), PPE used.",
    ),
    CategoryId.SURVEY_INVENTORY: CategorySpec(
        title="Survey & Inventory",
        guide=(
            "Survey Methodology (e.g., transects)",
            "Transect Spacing",
            "Area Covered",
            "General Observations",
        ),
        example=(
            "Conducted a pedestrian survey using 15-meter transects across the staging "
            "area. Ground visibility is about 50% due to grass. No cultural resources "
            "observed."
        ),
        checklist=(
            "Survey methodology (e.g., transects), Area surveyed, General observations "
            "(or 'negative findings')."
        ),
    ),
    CategoryId.SITE_RECORDING: CategorySpec(
        title="Site Recording",
        guide=(
            "Feature Descriptions",
            "Dimensions (L x W x H)",
            "Colors & Materials",
            "Association with other finds",
        ),
        example=(
            "Observed a historic refuse scatter, approx 5 by 5 meters. Contains amethyst "
            "glass shards and white ceramic fragments. No diagnostic markings found."
        ),
        checklist=(
            "Description of features (if any), Dimensions, Colors/Materials. If nothing "
            "found, explicit statement of no features."
        ),
    ),
    CategoryId.EXCAVATIONS: CategorySpec(
        title="Excavations",
        guide=(
            "Excavation Method",
            "Depth Reached",
            "Soil Type / Texture / Color",
            "Stratigraphy Layers",
        ),
        example=(
            "Monitoring excavator trenching for the new pipeline. Depth is currently "
            "4 feet. Soil is dark brown silty clay loam. No stratigraphy changes yet."
        ),
        checklist=(
            "Excavation method, Depth reached, Soil type/color, Stratigraphy layers. "
            "If no excavation, explicit statement."
        ),
    ),
    CategoryId.FINDS: CategorySpec(
        title="Finds & Materials",
        guide=(
            "Item Type (e.g., Lithic, Historic)",
            "Material",
            "Quantity",
            "Description / Diagnostics",
        ),
        example=(
            "Found one obsidian flake, secondary debitage. Located near the oak tree at "
            "the field edge. Collected for analysis."
        ),
        checklist=(
            "Item type (e.g., lithic, historic glass), Material, Quantity, Description. "
            "If no finds, explicit statement of 'no cultural resources observed'."
        ),
    ),
    CategoryId.CONDITION_FOLLOWUP: CategorySpec(
        title="Condition & Follow-up",
        guide=(
            "Overall Site Condition",
            "New Disturbances",
            "Action Taken",
            "Future Recommendations",
        ),
        example=(
            "Site CA-SBR-123 appears stable with no new disturbances. Recommendation is "
            "to continue monitoring during grading activities tomorrow."
        ),
        checklist=(
            "Overall site condition (e.g., stable, eroding), Disturbances, Actions taken, "
            "Recommendations."
        ),
    ),
    CategoryId.ADDITIONAL_NOTES: CategorySpec(
        title="Additional Notes",
        guide=(
            "Clarifications",
            "Context for other sections",
            "Notes to Project Manager",
            "Misc Observations",
        ),
        example=(
            "Access to the southern gate was blocked by construction equipment today. "
            "We had to hike in from the east road. The foreman mentioned they will be "
            "grading the north sector tomorrow."
        ),
        checklist=(
            "Optional section. Always mark 'isComplete' as true unless the user asks a "
            "specific question requiring a response."
        ),
    ),
}


def spec_for(category_id: CategoryId) -> CategorySpec:
    """Get the static description for a category."""
    return CATALOG[category_id]


__all__ = ["CATALOG", "CategorySpec", "spec_for"]
