from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from companion.core.errors import UnsupportedMediaType

MediaType = Literal["pdf", "docx", "pptx", "jpeg", "png", "webp", "audio"]
SourceStrategy = Literal["pdf", "ocr", "docx-markup", "pptx-markup", "transcription"]

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

MEDIA_TYPE_HINTS: dict[str, MediaType] = {
    "application/pdf": "pdf",
    DOCX_MIME: "docx",
    PPTX_MIME: "pptx",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
    "image/png": "png",
    "image/webp": "webp",
    "pdf": "pdf",
    "docx": "docx",
    "pptx": "pptx",
    "jpeg": "jpeg",
    "jpg": "jpeg",
    "png": "png",
    "webp": "webp",
    "audio": "audio",
}

IMAGE_MEDIA_TYPES: frozenset[str] = frozenset({"jpeg", "png", "webp"})


def resolve_media_type(declared: str) -> MediaType:
    value = (declared or "").split(";", 1)[0].strip().lower()
    if value.startswith("audio/"):
        return "audio"
    media_type = MEDIA_TYPE_HINTS.get(value)
    if media_type is None:
        raise UnsupportedMediaType(declared)
    return media_type


class ExtractionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: bytes
    media_type: MediaType
    declared_type: str

    @classmethod
    def from_upload(cls, content: bytes, declared_type: str) -> "ExtractionRequest":
        return cls(content=content, media_type=resolve_media_type(declared_type), declared_type=declared_type)


class ExtractionResult(BaseModel):
    text: str
    source_strategy: SourceStrategy
    used_fallback: bool = False
