"""Inference module for field monitoring.

Provides the inference gateway, its backends, and the shared retry wrapper.
"""

from typing import TYPE_CHECKING

from ..errors import ConfigurationError
from .client import ClaudeBackend, ClaudeBackendConfig
from .gateway import InferenceGateway
from .mock import MockInferenceBackend, MockTranscriber, create_offline_backend
from .model import (
    NO_CONTENT_TRANSCRIPT,
    AudioNote,
    ExtractionResult,
    InferenceBackend,
    NoteSource,
    TextNote,
    ValidationResult,
)
from .retry import RetryPolicy, call_with_retry, is_rate_limited, retry_async
from .transcriber import Transcriber

if TYPE_CHECKING:
    from ..config import FieldmonConfig, TranscriptionConfig


def create_backend(
    config: "FieldmonConfig | None" = None,
    use_mock: bool = False,
) -> InferenceBackend:
    """Create an inference backend.

    Args:
        config: Field monitor configuration
        use_mock: If True, return the offline mock backend

    Returns:
        InferenceBackend implementation

    Raises:
        ConfigurationError: If the provider is unknown or the API key is not set
    """
    if use_mock or (config is not None and config.inference.provider == "mock"):
        return create_offline_backend()

    if config is not None and config.inference.provider != "claude":
        raise ConfigurationError(f"Unknown inference provider: {config.inference.provider}")

    if config is None:
        return ClaudeBackend(ClaudeBackendConfig.from_env())

    inference = config.inference
    return ClaudeBackend(
        ClaudeBackendConfig.from_env(
            model=inference.model,
            max_tokens=inference.max_tokens,
            temperature=inference.temperature,
            timeout_seconds=inference.timeout_seconds,
        )
    )


def create_transcriber(
    config: "TranscriptionConfig | None" = None,
    use_mock: bool = False,
) -> Transcriber:
    """Create a speech-to-text transcriber for recorded notes.

    The whisper model is loaded on first use, not here.

    Args:
        config: Transcription settings
        use_mock: If True, return a mock transcriber

    Returns:
        Transcriber implementation

    Raises:
        ConfigurationError: If the provider is unknown
    """
    if use_mock or (config is not None and config.provider == "mock"):
        return MockTranscriber()

    if config is not None and config.provider != "whisper":
        raise ConfigurationError(f"Unknown transcription provider: {config.provider}")

    from .whisper import WhisperTranscriber

    if config is None:
        return WhisperTranscriber()
    return WhisperTranscriber(
        model_size=config.model,
        device=config.device,
        compute_type=config.compute_type,
        language=config.language,
    )


def create_gateway(
    config: "FieldmonConfig | None" = None,
    use_mock: bool = False,
    transcriber: Transcriber | None = None,
) -> InferenceGateway:
    """Create an inference gateway from configuration.

    Args:
        config: Field monitor configuration
        use_mock: If True, use the offline mock backend
        transcriber: Speech-to-text for recorded notes. Built from the
            transcription config when omitted.

    Returns:
        Configured InferenceGateway
    """
    retry_policy = RetryPolicy()
    if config is not None:
        retry_policy = RetryPolicy(
            max_attempts=config.retry.max_attempts,
            base_delay_seconds=config.retry.base_delay_seconds,
        )
    if transcriber is None:
        transcriber = create_transcriber(
            config.transcription if config is not None else None,
            use_mock=use_mock,
        )
    return InferenceGateway(
        create_backend(config, use_mock=use_mock),
        retry_policy=retry_policy,
        transcriber=transcriber,
    )


__all__ = [
    "AudioNote",
    "ClaudeBackend",
    "ClaudeBackendConfig",
    "ExtractionResult",
    "InferenceBackend",
    "InferenceGateway",
    "MockInferenceBackend",
    "MockTranscriber",
    "NO_CONTENT_TRANSCRIPT",
    "NoteSource",
    "RetryPolicy",
    "TextNote",
    "Transcriber",
    "ValidationResult",
    "call_with_retry",
    "create_backend",
    "create_gateway",
    "create_transcriber",
    "create_offline_backend",
    "is_rate_limited",
    "retry_async",
]
