from __future__ import annotations

import logging

from companion.core.errors import ExtractionFailed, OcrError, PdfParseError
from companion.extraction.models import (
    IMAGE_MEDIA_TYPES,
    ExtractionRequest,
    ExtractionResult,
    resolve_media_type,
)
from companion.extraction.normalize import normalize_text
from companion.extraction.strategies import (
    OcrStrategy,
    PdfTextStrategy,
    TextStrategy,
    docx_markup_strategy,
    pptx_markup_strategy,
)
from companion.services.transcription import PlaceholderTranscriber, Transcriber

logger = logging.getLogger(__name__)


class ExtractionDispatcher:
    """Routes an upload to the extraction strategy for its declared media type.

    The only recovery point is PDF -> OCR for scanned or malformed PDFs; every
    other strategy failure surfaces as ExtractionFailed.
    """

    def __init__(
        self,
        *,
        pdf: TextStrategy | None = None,
        ocr: TextStrategy | None = None,
        docx: TextStrategy | None = None,
        pptx: TextStrategy | None = None,
        transcriber: Transcriber | None = None,
    ):
        self._pdf = pdf or PdfTextStrategy()
        self._ocr = ocr or OcrStrategy()
        self._docx = docx or docx_markup_strategy()
        self._pptx = pptx or pptx_markup_strategy()
        self._transcriber = transcriber or PlaceholderTranscriber()

    def extract(self, content: bytes, media_type: str) -> ExtractionResult:
        resolved = resolve_media_type(media_type)

        if resolved == "pdf":
            return self._extract_pdf(content)
        if resolved == "docx":
            return ExtractionResult(text=self._docx.extract(content), source_strategy="docx-markup")
        if resolved == "pptx":
            return ExtractionResult(text=self._pptx.extract(content), source_strategy="pptx-markup")
        if resolved in IMAGE_MEDIA_TYPES:
            return self._extract_image(content)
        return self._transcribe(content, media_type)

    def extract_request(self, request: ExtractionRequest) -> ExtractionResult:
        return self.extract(request.content, request.declared_type)

    def _extract_pdf(self, content: bytes) -> ExtractionResult:
        try:
            return ExtractionResult(text=self._pdf.extract(content), source_strategy="pdf")
        except PdfParseError as primary_exc:
            logger.warning("pdf_parse_failed_trying_ocr size=%s: %s", len(content), primary_exc)

        try:
            text = self._ocr.extract(content)
        except OcrError as fallback_exc:
            logger.warning("pdf_ocr_fallback_failed size=%s: %s", len(content), fallback_exc)
            raise ExtractionFailed("Failed to extract text from PDF") from fallback_exc
        return ExtractionResult(text=text, source_strategy="ocr", used_fallback=True)

    def _extract_image(self, content: bytes) -> ExtractionResult:
        try:
            text = self._ocr.extract(content)
        except OcrError as exc:
            logger.warning("image_ocr_failed size=%s: %s", len(content), exc)
            raise ExtractionFailed("Failed to extract text from image") from exc
        return ExtractionResult(text=text, source_strategy="ocr")

    def _transcribe(self, content: bytes, media_type: str) -> ExtractionResult:
        try:
            text = self._transcriber.transcribe(content, media_type)
        except Exception as exc:
            logger.warning("audio_transcription_failed media_type=%s: %s", media_type, exc)
            raise ExtractionFailed("Failed to transcribe audio") from exc
        return ExtractionResult(text=normalize_text(text or ""), source_strategy="transcription")
