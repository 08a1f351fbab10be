"""Faster-whisper transcriber for recorded notes.

Uses faster-whisper (CTranslate2) for speech-to-text on CPU or GPU. The
encoded payload (webm, ogg, wav, mp4) is decoded by faster-whisper itself,
so no conversion happens here.
"""

import asyncio
import io
import logging
import threading
import time
from typing import Any

from faster_whisper import WhisperModel

from ..errors import InferenceError

logger = logging.getLogger(__name__)


class WhisperTranscriber:
    """Speech-to-text transcriber using faster-whisper.

    The model is loaded on first use and shared by later calls.
    Transcription runs in a worker thread so the event loop stays free.
    """

    def __init__(
        self,
        model_size: str = "base.en",
        device: str = "cpu",
        compute_type: str = "int8",
        language: str | None = "en",
    ) -> None:
        """Initialize Whisper transcriber.

        Args:
            model_size: Whisper model size or local model path
            device: Device to run on ("cpu", "cuda", "auto")
            compute_type: Computation type ("float16", "int8", "float32")
            language: Expected language code, or None to auto-detect
        """
        self._model_size = model_size
        self._device = device
        self._compute_type = compute_type
        self._language = language
        self._model: Any = None
        self._load_lock = threading.Lock()

    @property
    def model_size(self) -> str:
        """Get model size."""
        return self._model_size

    @property
    def is_loaded(self) -> bool:
        """Check if model is loaded."""
        return self._model is not None

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        """Transcribe an encoded audio payload to text.

        Args:
            audio: Encoded audio bytes
            mime_type: Content type of the payload

        Returns:
            Transcribed text. Empty if no speech was detected.

        Raises:
            InferenceError: If the audio cannot be decoded or transcribed
        """
        if not audio:
            return ""
        return await asyncio.to_thread(self._transcribe_sync, audio, mime_type)

    def _ensure_model_loaded(self) -> None:
        with self._load_lock:
            if self._model is not None:
                return

            logger.info(
                f"Loading Whisper model: {self._model_size} "
                f"(device={self._device}, compute={self._compute_type})"
            )
            start = time.time()
            self._model = WhisperModel(
                self._model_size,
                device=self._device,
                compute_type=self._compute_type,
            )
            load_time = (time.time() - start) * 1000
            logger.info(f"Whisper model loaded in {load_time:.0f}ms")

    def _transcribe_sync(self, audio: bytes, mime_type: str) -> str:
        self._ensure_model_loaded()
        start_time = time.time()

        try:
            segments, _info = self._model.transcribe(
                io.BytesIO(audio),
                language=self._language,
                beam_size=1,
                vad_filter=True,
            )
            # Segments are lazy; decoding errors surface while iterating
            text = " ".join(segment.text.strip() for segment in segments).strip()
        except Exception as e:
            raise InferenceError(f"Could not transcribe {mime_type} audio: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Transcribed {len(audio)} bytes of {mime_type} in {latency_ms}ms")
        return text


__all__ = ["WhisperTranscriber"]
