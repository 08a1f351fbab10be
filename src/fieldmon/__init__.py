"""Field Monitor - voice and text report assistant for cultural resources monitoring.

fieldmon guides a field monitor through eight report categories:
- Notes are captured as text or audio
- An inference service extracts structured fields from each note
- Each category is validated against its completion checklist
- Finished jobs are aggregated into one consolidated field report

Usage:
    python -m fieldmon --profile dev
    python -m fieldmon --mock
"""

__version__ = "0.1.0"

from .categories import Category, CategoryId, CategoryStatus, JobState, Note
from .config import FieldmonConfig
from .config.loader import load_config
from .errors import FieldmonError
from .inference import AudioNote, InferenceGateway, TextNote, create_gateway
from .report import FieldReport
from .session import AppView, SessionController

__all__ = [
    "AppView",
    "AudioNote",
    "Category",
    "CategoryId",
    "CategoryStatus",
    "FieldReport",
    "FieldmonConfig",
    "FieldmonError",
    "InferenceGateway",
    "JobState",
    "Note",
    "SessionController",
    "TextNote",
    "__version__",
    "create_gateway",
    "load_config",
]
