from __future__ import annotations

import logging
import os
from io import BytesIO
from typing import Protocol

from openai import OpenAI

from companion.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

_AUDIO_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/mp4": "m4a",
    "audio/ogg": "ogg",
}


class Transcriber(Protocol):
    def transcribe(self, content: bytes, media_type: str) -> str: ...


class PlaceholderTranscriber:
    """Stand-in used until a speech-to-text backend is configured."""

    def transcribe(self, content: bytes, media_type: str) -> str:
        logger.info("audio_transcription_requested media_type=%s size=%s", media_type, len(content))
        size_mb = len(content) / 1024 / 1024
        return (
            "[Audio Transcription Placeholder]\n\n"
            "To enable audio transcription, set TRANSCRIBER=openai and provide OPENAI_API_KEY.\n\n"
            "For now, please upload text-based files (PDF, images) or manually provide the transcript.\n\n"
            f"Audio file received: {size_mb:.2f} MB"
        )


class OpenAITranscriber:
    def __init__(self, model: str, api_key: str | None = None, timeout_s: float = 120.0):
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")
        self._model = model
        self._client = OpenAI(
            api_key=key,
            base_url=(os.getenv("OPENAI_BASE_URL") or None),
            timeout=timeout_s,
        )

    def transcribe(self, content: bytes, media_type: str) -> str:
        file_obj = BytesIO(content)
        extension = _AUDIO_EXTENSIONS.get(media_type.split(";", 1)[0].strip().lower(), "mp3")
        file_obj.name = f"upload.{extension}"
        response = self._client.audio.transcriptions.create(model=self._model, file=file_obj)
        text = getattr(response, "text", None)
        if not text:
            return ""
        return str(text).strip()


def get_transcriber(settings: Settings | None = None) -> Transcriber:
    cfg = settings or default_settings
    if cfg.transcriber == "openai":
        return OpenAITranscriber(model=cfg.transcribe_model)
    if cfg.transcriber == "placeholder":
        return PlaceholderTranscriber()
    raise ValueError(f"Unsupported TRANSCRIBER='{cfg.transcriber}'")
