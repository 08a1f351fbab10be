"""Transcriber protocol for recorded notes.

Recorded notes are turned into text before extraction; the gateway only
needs text back.
"""

from typing import Protocol


class Transcriber(Protocol):
    """Interface for speech-to-text transcription."""

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        """Transcribe an audio payload to text.

        Args:
            audio: Encoded audio bytes
            mime_type: Content type of the payload

        Returns:
            Transcribed text. Empty if nothing intelligible was heard.

        Raises:
            InferenceError: If transcription fails
        """
        ...


__all__ = ["Transcriber"]
