"""Unit tests for speech-to-text transcribers."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from fieldmon.categories import CategoryId, FindsData
from fieldmon.config import FieldmonConfig, TranscriptionConfig
from fieldmon.errors import ConfigurationError, InferenceError
from fieldmon.inference import AudioNote, MockTranscriber, create_gateway, create_transcriber
from fieldmon.inference.whisper import WhisperTranscriber


def segments(*texts: str) -> tuple[list[SimpleNamespace], SimpleNamespace]:
    return [SimpleNamespace(text=t) for t in texts], SimpleNamespace(language="en")


class TestWhisperTranscriber:
    """Tests for WhisperTranscriber with the model patched out."""

    @pytest.mark.asyncio
    async def test_joins_segments(self) -> None:
        with patch("fieldmon.inference.whisper.WhisperModel") as model_cls:
            model_cls.return_value.transcribe.return_value = segments(
                " Found two flakes.", " Bagged as F-12. "
            )
            transcriber = WhisperTranscriber(model_size="tiny.en")

            text = await transcriber.transcribe(b"\x1a\x45", "audio/webm")

        assert text == "Found two flakes. Bagged as F-12."
        model_cls.assert_called_once_with("tiny.en", device="cpu", compute_type="int8")
        kwargs = model_cls.return_value.transcribe.call_args.kwargs
        assert kwargs["language"] == "en"
        assert kwargs["vad_filter"] is True

    @pytest.mark.asyncio
    async def test_model_loads_once(self) -> None:
        """Test the model is loaded lazily and reused."""
        with patch("fieldmon.inference.whisper.WhisperModel") as model_cls:
            model_cls.return_value.transcribe.side_effect = lambda *a, **k: segments("note")
            transcriber = WhisperTranscriber()
            assert not transcriber.is_loaded

            await transcriber.transcribe(b"\x00\x01", "audio/wav")
            await transcriber.transcribe(b"\x00\x01", "audio/wav")

        assert transcriber.is_loaded
        assert model_cls.call_count == 1

    @pytest.mark.asyncio
    async def test_empty_audio_skips_model(self) -> None:
        with patch("fieldmon.inference.whisper.WhisperModel") as model_cls:
            transcriber = WhisperTranscriber()

            assert await transcriber.transcribe(b"", "audio/webm") == ""

        model_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_silence_is_empty(self) -> None:
        with patch("fieldmon.inference.whisper.WhisperModel") as model_cls:
            model_cls.return_value.transcribe.return_value = segments()
            transcriber = WhisperTranscriber()

            assert await transcriber.transcribe(b"\x00", "audio/webm") == ""

    @pytest.mark.asyncio
    async def test_decode_failure_is_inference_error(self) -> None:
        with patch("fieldmon.inference.whisper.WhisperModel") as model_cls:
            model_cls.return_value.transcribe.side_effect = ValueError("bad container")
            transcriber = WhisperTranscriber()

            with pytest.raises(InferenceError, match="audio/ogg"):
                await transcriber.transcribe(b"\x00", "audio/ogg")


class TestCreateTranscriber:
    """Tests for the transcriber factory."""

    def test_create_mock_transcriber(self) -> None:
        assert isinstance(create_transcriber(use_mock=True), MockTranscriber)

    def test_mock_provider(self) -> None:
        transcriber = create_transcriber(TranscriptionConfig(provider="mock"))
        assert isinstance(transcriber, MockTranscriber)

    def test_whisper_provider_uses_config(self) -> None:
        """Test the whisper transcriber is built without loading the model."""
        config = TranscriptionConfig(model="small.en", device="cuda", compute_type="float16")

        with patch("fieldmon.inference.whisper.WhisperModel") as model_cls:
            transcriber = create_transcriber(config)

        assert isinstance(transcriber, WhisperTranscriber)
        assert transcriber.model_size == "small.en"
        assert not transcriber.is_loaded
        model_cls.assert_not_called()

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError):
            create_transcriber(TranscriptionConfig(provider="dictaphone"))


class TestGatewayTranscription:
    """Tests for transcriber wiring in create_gateway."""

    @pytest.mark.asyncio
    async def test_mock_gateway_accepts_audio(self) -> None:
        """Test recorded notes work offline without extra setup."""
        gateway = create_gateway(FieldmonConfig(), use_mock=True)

        result = await gateway.extract(
            AudioNote(b"\x00", "audio/webm"), CategoryId.FINDS, FindsData()
        )

        assert result.no_content

    def test_explicit_transcriber_is_kept(self) -> None:
        transcriber = MagicMock()
        gateway = create_gateway(FieldmonConfig(), use_mock=True, transcriber=transcriber)
        assert gateway._transcriber is transcriber
