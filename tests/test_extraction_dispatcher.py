import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from companion.core.errors import (  # noqa: E402
    ExtractionFailed,
    OcrError,
    PdfParseError,
    UnsupportedMediaType,
)
from companion.extraction.dispatcher import ExtractionDispatcher  # noqa: E402
from companion.extraction.models import ExtractionRequest, resolve_media_type  # noqa: E402


def _strategy(name: str, text: str = "", error: Exception | None = None) -> MagicMock:
    strategy = MagicMock()
    strategy.name = name
    if error is not None:
        strategy.extract.side_effect = error
    else:
        strategy.extract.return_value = text
    return strategy


class ExtractionDispatcherTests(unittest.TestCase):
    def setUp(self):
        self.pdf = _strategy("pdf", "pdf text")
        self.ocr = _strategy("ocr", "ocr text")
        self.docx = _strategy("docx-markup", "docx text")
        self.pptx = _strategy("pptx-markup", "pptx text")
        self.transcriber = MagicMock()
        self.transcriber.transcribe.return_value = "spoken words"
        self.dispatcher = ExtractionDispatcher(
            pdf=self.pdf,
            ocr=self.ocr,
            docx=self.docx,
            pptx=self.pptx,
            transcriber=self.transcriber,
        )

    def test_each_supported_type_returns_strategy_text(self):
        cases = [
            ("application/pdf", "pdf text", "pdf"),
            (
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                "docx text",
                "docx-markup",
            ),
            (
                "application/vnd.openxmlformats-officedocument.presentationml.presentation",
                "pptx text",
                "pptx-markup",
            ),
            ("image/jpeg", "ocr text", "ocr"),
            ("image/png", "ocr text", "ocr"),
            ("image/webp", "ocr text", "ocr"),
            ("audio/mpeg", "spoken words", "transcription"),
            ("audio/webm", "spoken words", "transcription"),
        ]
        for media_type, expected_text, expected_strategy in cases:
            with self.subTest(media_type=media_type):
                result = self.dispatcher.extract(b"payload", media_type)
                self.assertEqual(result.text, expected_text)
                self.assertEqual(result.source_strategy, expected_strategy)
                self.assertFalse(result.used_fallback)

    def test_unsupported_media_type_is_rejected(self):
        for media_type in ("text/plain", "application/msword", "video/mp4", ""):
            with self.subTest(media_type=media_type):
                with self.assertRaises(UnsupportedMediaType) as ctx:
                    self.dispatcher.extract(b"payload", media_type)
                self.assertEqual(ctx.exception.code, "unsupported_media_type")
        self.pdf.extract.assert_not_called()
        self.ocr.extract.assert_not_called()

    def test_pdf_failure_falls_back_to_ocr(self):
        self.pdf.extract.side_effect = PdfParseError("corrupt xref")
        self.ocr.extract.return_value = "hello"

        result = self.dispatcher.extract(b"%PDF-broken", "application/pdf")

        self.assertEqual(result.text, "hello")
        self.assertTrue(result.used_fallback)
        self.assertEqual(result.source_strategy, "ocr")
        self.ocr.extract.assert_called_once_with(b"%PDF-broken")

    def test_pdf_and_ocr_failure_raises_extraction_failed(self):
        self.pdf.extract.side_effect = PdfParseError("corrupt")
        ocr_error = OcrError("cannot identify image")
        self.ocr.extract.side_effect = ocr_error

        with self.assertRaises(ExtractionFailed) as ctx:
            self.dispatcher.extract(b"junk", "pdf")
        self.assertIs(ctx.exception.__cause__, ocr_error)

    def test_pdf_success_does_not_touch_ocr(self):
        self.dispatcher.extract(b"%PDF-1.7", "application/pdf")
        self.ocr.extract.assert_not_called()

    def test_image_ocr_failure_surfaces_as_extraction_failed(self):
        self.ocr.extract.side_effect = OcrError("bad image")
        with self.assertRaises(ExtractionFailed):
            self.dispatcher.extract(b"not-an-image", "image/png")

    def test_empty_ocr_text_is_returned_not_rejected(self):
        self.ocr.extract.return_value = ""
        result = self.dispatcher.extract(b"blank", "image/png")
        self.assertEqual(result.text, "")

    def test_audio_is_forwarded_with_declared_type_and_normalized(self):
        self.transcriber.transcribe.return_value = "  line one  \r\n\r\n\r\n\r\nline two  "
        result = self.dispatcher.extract(b"audio-bytes", "audio/wav")
        self.transcriber.transcribe.assert_called_once_with(b"audio-bytes", "audio/wav")
        self.assertEqual(result.text, "line one\n\nline two")

    def test_transcriber_error_surfaces_as_extraction_failed(self):
        self.transcriber.transcribe.side_effect = RuntimeError("service down")
        with self.assertRaises(ExtractionFailed):
            self.dispatcher.extract(b"audio-bytes", "audio/mpeg")

    def test_extract_request_uses_declared_type(self):
        request = ExtractionRequest.from_upload(b"payload", "image/jpeg")
        self.assertEqual(request.media_type, "jpeg")
        result = self.dispatcher.extract_request(request)
        self.assertEqual(result.text, "ocr text")


class MediaTypeResolutionTests(unittest.TestCase):
    def test_short_tags_and_mime_parameters(self):
        self.assertEqual(resolve_media_type("PDF"), "pdf")
        self.assertEqual(resolve_media_type("image/jpg"), "jpeg")
        self.assertEqual(resolve_media_type("audio/ogg; codecs=opus"), "audio")
        self.assertEqual(resolve_media_type("application/pdf; charset=binary"), "pdf")

    def test_unknown_type_raises(self):
        with self.assertRaises(UnsupportedMediaType):
            resolve_media_type("image/gif")


if __name__ == "__main__":
    unittest.main()
