from __future__ import annotations

import html
import logging
import re
import struct
import zlib
from io import BytesIO
from typing import Callable, Protocol
from zipfile import BadZipFile, ZipFile

import fitz  # PyMuPDF
import pytesseract
from PIL import Image
from pypdf import PdfReader

from companion.core.errors import OcrError, PdfParseError
from companion.extraction.normalize import collapse_whitespace, normalize_text, strip_markup

logger = logging.getLogger(__name__)

ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")
PDF_MAGIC = b"%PDF-"
PDF_RENDER_ZOOM = 2
# Pillow plugins report corrupt or truncated image data through all of these.
IMAGE_DECODE_ERRORS = (OSError, ValueError, SyntaxError, EOFError, struct.error, Image.DecompressionBombError)
WORD_RUN_RE = re.compile(r"<w:t(?:\s[^>]*)?>([^<]*)</w:t>")
SLIDE_RUN_RE = re.compile(r"<a:t(?:\s[^>]*)?>([^<]*)</a:t>")
_SLIDE_PART_RE = re.compile(r"^ppt/slides/slide(\d+)\.xml$")


class TextStrategy(Protocol):
    name: str

    def extract(self, content: bytes) -> str: ...


class PdfTextStrategy:
    name = "pdf"

    def extract(self, content: bytes) -> str:
        try:
            reader = PdfReader(BytesIO(content))
            encrypted = reader.is_encrypted
        except Exception as exc:
            raise PdfParseError(f"Unable to read PDF: {exc}") from exc

        if encrypted:
            try:
                unlocked = reader.decrypt("")
            except Exception as exc:
                raise PdfParseError(f"Unable to decrypt PDF: {exc}") from exc
            if not unlocked:
                raise PdfParseError("PDF is password protected.")

        try:
            page_chunks: list[str] = []
            for page in reader.pages:
                page_text = page.extract_text() or ""
                if page_text.strip():
                    page_chunks.append(page_text)
        except Exception as exc:
            raise PdfParseError(f"Unable to extract text from PDF: {exc}") from exc
        return normalize_text("\n\n".join(page_chunks))


class OcrStrategy:
    name = "ocr"

    def __init__(self, language: str = "eng"):
        self._language = language

    @property
    def language(self) -> str:
        return self._language

    def extract(self, content: bytes) -> str:
        """OCR an image, or every rendered page when the bytes are a PDF."""
        if PDF_MAGIC in content[:1024]:
            pages = [self._recognize(image_bytes) for image_bytes in render_pdf_pages(content)]
            return normalize_text("\n\n".join(page for page in pages if page))
        return self._recognize(content)

    def _recognize(self, content: bytes) -> str:
        try:
            with Image.open(BytesIO(content)) as image:
                image.load()
                try:
                    text = pytesseract.image_to_string(image, lang=self._language)
                except (OSError, RuntimeError) as exc:
                    raise OcrError(f"OCR engine failed: {exc}") from exc
        except IMAGE_DECODE_ERRORS as exc:
            raise OcrError(f"Unable to decode image: {exc}") from exc
        return normalize_text(text or "")


def render_pdf_pages(content: bytes, zoom: int = PDF_RENDER_ZOOM) -> list[bytes]:
    """Rasterize each PDF page to PNG bytes for OCR."""
    try:
        document = fitz.open(stream=content, filetype="pdf")
    except Exception as exc:
        raise OcrError(f"Unable to open PDF for OCR: {exc}") from exc

    with document:
        if document.needs_pass:
            raise OcrError("PDF is password protected.")
        if document.page_count == 0:
            raise OcrError("PDF has no pages to render.")
        matrix = fitz.Matrix(zoom, zoom)
        try:
            return [page.get_pixmap(matrix=matrix).tobytes("png") for page in document]
        except Exception as exc:
            raise OcrError(f"Unable to render PDF page: {exc}") from exc


def _is_zip_payload(content: bytes) -> bool:
    return content.startswith(ZIP_MAGICS)


def word_document_parts(names: list[str]) -> list[str]:
    return [name for name in names if name == "word/document.xml"]


def slide_parts(names: list[str]) -> list[str]:
    numbered: list[tuple[int, str]] = []
    for name in names:
        match = _SLIDE_PART_RE.match(name)
        if match:
            numbered.append((int(match.group(1)), name))
    return [name for _, name in sorted(numbered)]


class OfficeMarkupStrategy:
    """Pulls text runs out of Office Open XML markup with a regex scan.

    Never raises: a buffer without matching runs degrades to tag stripping.
    """

    def __init__(
        self,
        *,
        name: str,
        run_pattern: re.Pattern[str],
        select_parts: Callable[[list[str]], list[str]],
    ):
        self.name = name
        self._run_pattern = run_pattern
        self._select_parts = select_parts

    def _package_sources(self, content: bytes) -> list[str]:
        if not _is_zip_payload(content):
            return []
        try:
            with ZipFile(BytesIO(content)) as archive:
                parts = self._select_parts(archive.namelist())
                return [archive.read(part).decode("utf-8", errors="replace") for part in parts]
        except (BadZipFile, KeyError, OSError, RuntimeError, EOFError, ValueError, zlib.error) as exc:
            logger.debug("office_package_unreadable strategy=%s: %s", self.name, exc)
            return []

    def extract(self, content: bytes) -> str:
        sources = self._package_sources(content) or [content.decode("utf-8", errors="replace")]
        runs = [run for source in sources for run in self._run_pattern.findall(source)]
        if runs:
            return collapse_whitespace(" ".join(html.unescape(run) for run in runs))
        return strip_markup("\n".join(sources))


def docx_markup_strategy() -> OfficeMarkupStrategy:
    return OfficeMarkupStrategy(name="docx-markup", run_pattern=WORD_RUN_RE, select_parts=word_document_parts)


def pptx_markup_strategy() -> OfficeMarkupStrategy:
    return OfficeMarkupStrategy(name="pptx-markup", run_pattern=SLIDE_RUN_RE, select_parts=slide_parts)
