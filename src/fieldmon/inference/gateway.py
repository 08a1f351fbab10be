"""Inference gateway for note extraction, validation and reporting.

Typed boundary between the category workflow and the external inference
service. Every backend call shares one retry wrapper, and every reply is
checked against the expected shape before it reaches the caller.
"""

import asyncio
import logging
import time
from collections.abc import Mapping
from typing import Any

from ..categories import Category, CategoryData, CategoryId, data_type_for, parse_data
from ..errors import ConfigurationError, MalformedResponseError, PreconditionViolation, SchemaError
from ..report.models import FieldReport
from .model import (
    NO_CONTENT_TRANSCRIPT,
    AudioNote,
    ExtractionResult,
    InferenceBackend,
    NoteSource,
    TextNote,
    ValidationResult,
)
from .prompts import (
    EXTRACT_SCHEMA_NAME,
    REPORT_SCHEMA_NAME,
    SYSTEM_PROMPT,
    VALIDATE_SCHEMA_NAME,
    VALIDATION_SCHEMA,
    build_extraction_prompt,
    build_report_prompt,
    build_validation_prompt,
    extraction_schema,
)
from .retry import RetryPolicy, Sleep, retry_async
from .transcriber import Transcriber

logger = logging.getLogger(__name__)


class InferenceGateway:
    """Extracts, validates and aggregates field data through a backend.

    Example:
        gateway = InferenceGateway(ClaudeBackend(config))
        result = await gateway.extract(TextNote("Found one obsidian flake"),
                                       CategoryId.FINDS, FindsData())
        if not result.no_content:
            ...
    """

    def __init__(
        self,
        backend: InferenceBackend,
        retry_policy: RetryPolicy | None = None,
        transcriber: Transcriber | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize gateway.

        Args:
            backend: Structured-output inference service.
            retry_policy: Retry bounds for rate-limited calls.
            transcriber: Speech-to-text for recorded notes.
            sleep: Awaitable sleep used between retries.
        """
        self._backend = backend
        self._retry_policy = retry_policy or RetryPolicy()
        self._transcriber = transcriber
        self._sleep = sleep

    @property
    def retry_policy(self) -> RetryPolicy:
        """Get the retry bounds."""
        return self._retry_policy

    async def extract(
        self,
        source: NoteSource,
        category_id: CategoryId,
        prior_data: CategoryData,
    ) -> ExtractionResult:
        """Transcribe a note and merge its facts into the category data.

        Args:
            source: Typed or recorded note.
            category_id: Category the note belongs to.
            prior_data: The category's current structured data.

        Returns:
            ExtractionResult. When the input carries no content the
            transcript is the no-content sentinel and merged_data is
            prior_data.

        Raises:
            ConfigurationError: If audio arrives without a transcriber.
            PreconditionViolation: If prior_data belongs to another category.
            InferenceError: If the backend call fails.
        """
        if prior_data.category_id is not category_id:
            raise PreconditionViolation(
                f"Prior data for {prior_data.category_id.value} passed to {category_id.value}"
            )

        text = await self._note_text(source)
        if not text.strip():
            logger.info(f"No content detected in note for {category_id.value}")
            return ExtractionResult(transcript=NO_CONTENT_TRANSCRIPT, merged_data=prior_data)

        payload = await self._call(
            EXTRACT_SCHEMA_NAME,
            prompt=build_extraction_prompt(text, category_id, prior_data),
            schema=extraction_schema(data_type_for(category_id).json_schema()),
        )

        transcript = payload.get("transcript")
        if not isinstance(transcript, str) or not transcript.strip():
            raise MalformedResponseError("Extraction reply has no transcript")

        transcript = transcript.strip()
        if transcript == NO_CONTENT_TRANSCRIPT:
            logger.info(f"Backend found no content in note for {category_id.value}")
            return ExtractionResult(transcript=NO_CONTENT_TRANSCRIPT, merged_data=prior_data)

        # The record replaces the prior data wholesale
        updated = payload.get("updatedData")
        if not isinstance(updated, dict):
            raise MalformedResponseError("Extraction reply has no updatedData object")

        try:
            merged = parse_data(category_id, updated)
        except SchemaError as e:
            raise MalformedResponseError(f"Extraction reply data is invalid: {e}") from e

        return ExtractionResult(transcript=transcript, merged_data=merged)

    async def validate(self, category_id: CategoryId, data: CategoryData) -> ValidationResult:
        """Check category data against the category's completion checklist.

        Raises:
            InferenceError: If the backend call fails.
        """
        payload = await self._call(
            VALIDATE_SCHEMA_NAME,
            prompt=build_validation_prompt(category_id, data),
            schema=VALIDATION_SCHEMA,
        )

        is_complete = payload.get("isComplete")
        if not isinstance(is_complete, bool):
            raise MalformedResponseError("Validation reply has no isComplete flag")
        if is_complete:
            return ValidationResult(is_complete=True)

        missing = payload.get("missingInfo") or []
        if not isinstance(missing, list) or not all(isinstance(m, str) for m in missing):
            raise MalformedResponseError("Validation reply missingInfo must be a list of strings")

        return ValidationResult(
            is_complete=False,
            missing_info=tuple(m.strip() for m in missing if m.strip()),
        )

    async def aggregate(self, categories: Mapping[CategoryId, Category]) -> FieldReport:
        """Generate the consolidated field report for a whole job.

        Raises:
            InferenceError: If the backend call fails.
        """
        payload = await self._call(
            REPORT_SCHEMA_NAME,
            prompt=build_report_prompt(categories),
            schema=FieldReport.json_schema(),
        )

        try:
            return FieldReport.from_dict(payload)
        except SchemaError as e:
            raise MalformedResponseError(f"Report reply is invalid: {e}") from e

    async def _note_text(self, source: NoteSource) -> str:
        if isinstance(source, TextNote):
            return source.text
        if isinstance(source, AudioNote):
            if self._transcriber is None:
                raise ConfigurationError("No transcriber configured for recorded notes")
            transcriber = self._transcriber

            @retry_async(self._retry_policy, sleep=self._sleep, label="transcribe")
            async def transcribe() -> str:
                return await transcriber.transcribe(source.payload, source.mime_type)

            return await transcribe()
        raise TypeError(f"Unsupported note source: {type(source).__name__}")

    async def _call(self, schema_name: str, prompt: str, schema: dict[str, Any]) -> dict[str, Any]:
        @retry_async(self._retry_policy, sleep=self._sleep, label=schema_name)
        async def generate() -> dict[str, Any]:
            return await self._backend.generate_json(
                system=SYSTEM_PROMPT,
                prompt=prompt,
                schema=schema,
                schema_name=schema_name,
            )

        start_time = time.time()
        payload = await generate()
        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"{schema_name} completed in {latency_ms}ms")

        if not isinstance(payload, dict):
            raise MalformedResponseError(f"{schema_name} reply is not a JSON object")
        return payload


__all__ = ["InferenceGateway"]
