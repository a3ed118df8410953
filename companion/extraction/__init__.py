from .dispatcher import ExtractionDispatcher
from .models import ExtractionRequest, ExtractionResult, MediaType, resolve_media_type
from .normalize import collapse_whitespace, normalize_text, strip_markup
from .strategies import (
    OcrStrategy,
    OfficeMarkupStrategy,
    PdfTextStrategy,
    docx_markup_strategy,
    pptx_markup_strategy,
)

__all__ = [
    "ExtractionDispatcher",
    "ExtractionRequest",
    "ExtractionResult",
    "MediaType",
    "resolve_media_type",
    "collapse_whitespace",
    "normalize_text",
    "strip_markup",
    "OcrStrategy",
    "OfficeMarkupStrategy",
    "PdfTextStrategy",
    "docx_markup_strategy",
    "pptx_markup_strategy",
]
