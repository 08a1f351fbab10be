"""Claude backend for the inference gateway.

Uses forced tool use so every reply is a JSON object matching the
requested schema.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any

import anthropic

from ..errors import (
    ConfigurationError,
    InferenceError,
    MalformedResponseError,
    NetworkError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)

# Status codes the API uses for throttling and overload
RATE_LIMIT_STATUS_CODES = frozenset({429, 529})


@dataclass
class ClaudeBackendConfig:
    """Configuration for the Claude backend."""

    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 4096
    temperature: float = 0.2
    timeout_seconds: float = 60.0

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClaudeBackendConfig":
        """Create config with the API key from the environment.

        Args:
            **overrides: Values for the remaining fields.

        Returns:
            ClaudeBackendConfig with API key from environment.

        Raises:
            ConfigurationError: If ANTHROPIC_API_KEY is not set.
        """
        api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()
        if not api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Set it to enable note extraction and report generation."
            )
        return cls(api_key=api_key, **overrides)


class ClaudeBackend:
    """Structured-output backend backed by the Claude API."""

    def __init__(self, config: ClaudeBackendConfig) -> None:
        """Initialize Claude backend.

        Args:
            config: Configuration for the backend.
        """
        self._config = config
        self._client = anthropic.AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._config.model

    async def generate_json(
        self,
        *,
        system: str,
        prompt: str,
        schema: dict[str, Any],
        schema_name: str,
    ) -> dict[str, Any]:
        """Send a prompt and return the tool input Claude produced.

        Raises:
            ConfigurationError: If authentication fails.
            RateLimitedError: If the API is throttling or overloaded.
            NetworkError: If the API cannot be reached or times out.
            MalformedResponseError: If the reply carries no tool call.
            InferenceError: If the API returns any other error.
        """
        start_time = time.time()

        try:
            response = await self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
                tools=[
                    {
                        "name": schema_name,
                        "description": f"Record the {schema_name} result.",
                        "input_schema": schema,
                    }
                ],
                tool_choice={"type": "tool", "name": schema_name},
            )
        except anthropic.AuthenticationError as e:
            raise ConfigurationError(
                "Invalid API key. Please check your ANTHROPIC_API_KEY."
            ) from e
        except anthropic.RateLimitError as e:
            raise RateLimitedError(f"Rate limited: {e.message}", status_code=e.status_code) from e
        except anthropic.APITimeoutError as e:
            # Timeout is a subclass of connection error, so it goes first
            raise NetworkError(
                f"Request timed out after {self._config.timeout_seconds} seconds."
            ) from e
        except anthropic.APIConnectionError as e:
            raise NetworkError(f"Failed to connect to Claude API: {e}") from e
        except anthropic.APIStatusError as e:
            if e.status_code in RATE_LIMIT_STATUS_CODES:
                raise RateLimitedError(
                    f"API overloaded: {e.message}", status_code=e.status_code
                ) from e
            raise InferenceError(f"API error: {e.message}", status_code=e.status_code) from e

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"{schema_name} reply in {latency_ms}ms "
            f"({response.usage.input_tokens}+{response.usage.output_tokens} tokens)"
        )

        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == schema_name:
                if not isinstance(block.input, dict):
                    raise MalformedResponseError(f"{schema_name} reply is not a JSON object")
                return block.input

        raise MalformedResponseError(f"No {schema_name} result in reply")


__all__ = ["ClaudeBackend", "ClaudeBackendConfig", "RATE_LIMIT_STATUS_CODES"]
