"""Inference request and result types.

Defines note sources, gateway results, and the backend protocol.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from ..categories import CategoryData

# Transcript sentinel for input with no intelligible content
NO_CONTENT_TRANSCRIPT = "NO_SPEECH_DETECTED"


@dataclass(frozen=True)
class TextNote:
    """A typed note.

    Attributes:
        text: Raw text entered by the worker
    """

    text: str


@dataclass(frozen=True)
class AudioNote:
    """A recorded note.

    Attributes:
        payload: Decoded audio bytes
        mime_type: Content type of the payload (e.g., "audio/webm")
    """

    payload: bytes
    mime_type: str


NoteSource = TextNote | AudioNote


@dataclass(frozen=True)
class ExtractionResult:
    """Result of extracting structured data from one note.

    Attributes:
        transcript: Transcript of the input, or the no-content sentinel
        merged_data: Prior data merged with anything new in the note
    """

    transcript: str
    merged_data: CategoryData

    @property
    def no_content(self) -> bool:
        """Return True if the input carried nothing usable."""
        return self.transcript == NO_CONTENT_TRANSCRIPT


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a category against its completion checklist.

    Attributes:
        is_complete: True if every checklist item is satisfied
        missing_info: Items still needed, scoped to the category
    """

    is_complete: bool
    missing_info: tuple[str, ...] = ()


class InferenceBackend(Protocol):
    """Interface for a structured-output inference service.

    Implementations send one prompt and return a JSON object conforming to
    the supplied schema.
    """

    async def generate_json(
        self,
        *,
        system: str,
        prompt: str,
        schema: dict[str, Any],
        schema_name: str,
    ) -> dict[str, Any]:
        """Generate a JSON object for the prompt.

        Args:
            system: System prompt
            prompt: User prompt
            schema: JSON Schema the reply must conform to
            schema_name: Short identifier for the schema

        Returns:
            Decoded JSON object

        Raises:
            RateLimitedError: If the service is throttling requests
            NetworkError: If the service cannot be reached
            MalformedResponseError: If the reply carries no JSON object
            InferenceError: For any other service failure
        """
        ...


__all__ = [
    "AudioNote",
    "ExtractionResult",
    "InferenceBackend",
    "NO_CONTENT_TRANSCRIPT",
    "NoteSource",
    "TextNote",
    "ValidationResult",
]
