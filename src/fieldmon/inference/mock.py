"""Mock inference backend and transcriber for testing.

Provides controllable implementations for unit tests, integration tests and
offline CLI runs.
"""

import json
import re
from collections import deque
from collections.abc import Callable
from typing import Any

from ..errors import MalformedResponseError
from .prompts import EXTRACT_SCHEMA_NAME, REPORT_SCHEMA_NAME, VALIDATE_SCHEMA_NAME

Responder = Callable[[str], dict[str, Any]]

_NOTE_PATTERN = re.compile(r'^NEW NOTE: "(.*)"\n\nEXISTING DATA: ', re.MULTILINE | re.DOTALL)
_EXISTING_PATTERN = re.compile(r"^EXISTING DATA: (.*)\Z", re.MULTILINE)


class MockInferenceBackend:
    """Mock backend returning queued or preset replies.

    Queued items (replies or exceptions) are consumed first-in first-out.
    When the queue is empty, the responder registered for the requested
    schema answers.
    """

    def __init__(self) -> None:
        """Initialize mock backend."""
        self._queue: deque[dict[str, Any] | Exception] = deque()
        self._responders: dict[str, Responder] = {}
        self._calls: list[dict[str, Any]] = []

    def queue_response(self, payload: dict[str, Any]) -> None:
        """Queue a reply for the next call.

        Args:
            payload: JSON object to return
        """
        self._queue.append(payload)

    def queue_error(self, error: Exception) -> None:
        """Queue an error to raise on the next call.

        Args:
            error: Exception to raise
        """
        self._queue.append(error)

    def set_response(self, schema_name: str, payload: dict[str, Any]) -> None:
        """Set a fixed reply for every call using a schema."""
        self._responders[schema_name] = lambda _prompt: payload

    def set_responder(self, schema_name: str, responder: Responder) -> None:
        """Set a function computing the reply from the prompt."""
        self._responders[schema_name] = responder

    async def generate_json(
        self,
        *,
        system: str,
        prompt: str,
        schema: dict[str, Any],
        schema_name: str,
    ) -> dict[str, Any]:
        """Return the next queued reply or the schema's preset reply."""
        self._calls.append(
            {"system": system, "prompt": prompt, "schema": schema, "schema_name": schema_name}
        )

        if self._queue:
            item = self._queue.popleft()
            if isinstance(item, Exception):
                raise item
            return item

        responder = self._responders.get(schema_name)
        if responder is None:
            raise MalformedResponseError(f"No mock reply configured for {schema_name}")
        return responder(prompt)

    @property
    def calls(self) -> list[dict[str, Any]]:
        """Get recorded calls in order."""
        return list(self._calls)

    @property
    def call_count(self) -> int:
        """Get number of generate_json calls."""
        return len(self._calls)

    def clear(self) -> None:
        """Reset mock state."""
        self._queue.clear()
        self._responders.clear()
        self._calls.clear()


class MockTranscriber:
    """Mock transcriber returning a preset transcript."""

    def __init__(self, text: str = "") -> None:
        """Initialize mock transcriber.

        Args:
            text: Transcript to return
        """
        self._text = text
        self._call_count = 0

    def set_response(self, text: str) -> None:
        """Set the transcript to return."""
        self._text = text

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        """Return the preset transcript."""
        self._call_count += 1
        return self._text

    @property
    def call_count(self) -> int:
        """Get number of transcribe calls."""
        return self._call_count


def echo_extraction(prompt: str) -> dict[str, Any]:
    """Reply to an extraction prompt by echoing the note and keeping prior data."""
    note = _NOTE_PATTERN.search(prompt)
    existing = _EXISTING_PATTERN.search(prompt)
    return {
        "transcript": note.group(1) if note else "",
        "updatedData": json.loads(existing.group(1)) if existing else {},
    }


def always_complete(_prompt: str) -> dict[str, Any]:
    """Reply to a validation prompt with a complete result."""
    return {"isComplete": True, "missingInfo": []}


def placeholder_report(_prompt: str) -> dict[str, Any]:
    """Reply to a report prompt with an empty report skeleton."""
    return {
        "project_meta": {"project_name": "", "date": "", "location": "", "monitor_name": ""},
        "env_safety": "",
        "survey_inventory": [],
        "site_recording": "",
        "excavations": "",
        "finds": "",
        "condition_assessment": {"condition": "", "recommendations": []},
        "daily_log": "Generated offline with the mock backend.",
    }


def create_offline_backend() -> MockInferenceBackend:
    """Create a mock backend that answers every operation without a network."""
    backend = MockInferenceBackend()
    backend.set_responder(EXTRACT_SCHEMA_NAME, echo_extraction)
    backend.set_responder(VALIDATE_SCHEMA_NAME, always_complete)
    backend.set_responder(REPORT_SCHEMA_NAME, placeholder_report)
    return backend


__all__ = [
    "MockInferenceBackend",
    "MockTranscriber",
    "always_complete",
    "create_offline_backend",
    "echo_extraction",
    "placeholder_report",
]
