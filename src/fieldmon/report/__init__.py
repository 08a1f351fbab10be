"""Final report generation for field monitoring jobs."""

from .aggregator import JobAggregator
from .models import ConditionAssessment, FieldReport, ProjectMeta, SurveyItem

__all__ = [
    "ConditionAssessment",
    "FieldReport",
    "JobAggregator",
    "ProjectMeta",
    "SurveyItem",
]
