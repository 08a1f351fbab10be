"""Configuration module for the field monitor assistant.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass
class InferenceConfig:
    """Inference backend configuration."""

    provider: str = "claude"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 4096
    temperature: float = 0.2
    timeout_seconds: float = 60.0


@dataclass
class TranscriptionConfig:
    """Speech-to-text configuration for recorded notes."""

    provider: str = "whisper"
    model: str = "base.en"
    device: str = "cpu"
    compute_type: str = "int8"
    language: str | None = "en"


@dataclass
class RetryConfig:
    """Retry configuration for rate-limited inference calls."""

    max_attempts: int = 3
    base_delay_seconds: float = 1.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class FieldmonConfig:
    """Main field monitor configuration."""

    inference: InferenceConfig = field(default_factory=InferenceConfig)
    transcription: TranscriptionConfig = field(default_factory=TranscriptionConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> FieldmonConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> FieldmonConfig:
        """Load configuration by profile name (dev, prod, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


# Public API
__all__ = [
    "ConfigLoader",
    "FieldmonConfig",
    "InferenceConfig",
    "LoggingConfig",
    "RetryConfig",
    "TranscriptionConfig",
]
