from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from rezepte.app.config import settings

from .errors import TranscriptionServiceError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:  # pragma: no cover - type-checkers only
    from faster_whisper import WhisperModel
else:  # pragma: no cover - imported lazily at runtime
    WhisperModel = "WhisperModel"  # type: ignore[assignment]


_model: Optional["WhisperModel"] = None
_model_error: Exception | None = None
_device_info: tuple[str, str] | None = None


def _detect_device() -> tuple[str, str]:
    """Pick (device, compute_type): float16 on CUDA, int8 on CPU."""
    global _device_info

    if _device_info is not None:
        return _device_info

    if settings.WHISPER_DEVICE == "cuda":
        _device_info = ("cuda", "float16")
        return _device_info
    if settings.WHISPER_DEVICE == "cpu":
        _device_info = ("cpu", "int8")
        return _device_info

    try:
        import ctranslate2
        if "float16" in ctranslate2.get_supported_compute_types("cuda"):
            logger.info("CUDA detected via ctranslate2, using GPU with float16")
            _device_info = ("cuda", "float16")
            return _device_info
    except Exception as exc:
        logger.debug("Error detecting CUDA via ctranslate2: %s", exc)

    logger.info("GPU not available, using CPU with int8 (quantized)")
    _device_info = ("cpu", "int8")
    return _device_info


def _get_model() -> "WhisperModel":
    """
    Lazily load the Whisper model.

    The load is attempted once; a failure is remembered and reported on every
    later call instead of retrying the import.
    """
    global _model, _model_error

    if _model is not None:
        return _model

    if _model_error is not None:
        raise TranscriptionServiceError(f"Speech-to-text model unavailable: {_model_error}")

    try:
        from faster_whisper import WhisperModel as _WhisperModel
        device, compute_type = _detect_device()

        logger.info(
            "Initializing faster-whisper: model=%s, device=%s, compute_type=%s",
            settings.WHISPER_MODEL,
            device,
            compute_type,
        )
        _model = _WhisperModel(
            settings.WHISPER_MODEL,
            device=device,
            compute_type=compute_type,
            num_workers=2,
        )
    except Exception as exc:
        _model_error = exc
        logger.error("Failed to initialize faster-whisper: %s", exc)
        raise TranscriptionServiceError(f"Speech-to-text model unavailable: {exc}") from exc

    logger.info("faster-whisper model initialized successfully")
    return _model


class Transcriber:
    """Speech-to-text over an audio file."""

    def __init__(self, language: str | None = settings.TRANSCRIPTION_LANGUAGE):
        self.language = language

    def transcribe(self, audio_path: Path) -> str:
        if not audio_path.exists():
            raise TranscriptionServiceError(f"Audio file not found: {audio_path}")

        model = _get_model()

        try:
            segments, info = model.transcribe(
                str(audio_path),
                language=self.language,
                vad_filter=True,
                vad_parameters=dict(
                    min_silence_duration_ms=500,
                    speech_pad_ms=200,
                ),
                beam_size=settings.WHISPER_BEAM_SIZE,
                condition_on_previous_text=False,
                word_timestamps=False,
            )
            parts = [seg.text.strip() for seg in segments if seg.text.strip()]
        except Exception as exc:
            logger.error("Transcription failed: %s", exc)
            raise TranscriptionServiceError(f"Transcription failed: {exc}") from exc

        text = " ".join(parts).strip()
        logger.info(
            "Transcription complete: chars=%d, language=%s",
            len(text),
            getattr(info, "language", self.language),
        )
        return text
