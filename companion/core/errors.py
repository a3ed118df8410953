from __future__ import annotations


class CompanionError(RuntimeError):
    def __init__(self, message: str, *, code: str = "companion_error"):
        super().__init__(message)
        self.code = code


class UnsupportedMediaType(CompanionError):
    def __init__(self, media_type: str):
        super().__init__(f"Unsupported file type: {media_type}", code="unsupported_media_type")
        self.media_type = media_type


class ExtractionFailed(CompanionError):
    def __init__(self, message: str = "Failed to extract text from the uploaded file"):
        super().__init__(message, code="extraction_failed")


class PdfParseError(CompanionError):
    def __init__(self, message: str = "Failed to parse PDF"):
        super().__init__(message, code="pdf_parse_error")


class OcrError(CompanionError):
    def __init__(self, message: str = "Failed to extract text from image"):
        super().__init__(message, code="ocr_error")


class RateLimitExceeded(CompanionError):
    def __init__(self, attempts: int):
        super().__init__(
            f"Model provider is still rate limiting after {attempts} attempts. Try again later.",
            code="rate_limit_exceeded",
        )
        self.attempts = attempts


class ModelInvocationError(CompanionError):
    def __init__(self, message: str = "Failed to generate content"):
        super().__init__(message, code="model_invocation_error")


class MalformedModelOutput(CompanionError):
    def __init__(self, message: str = "Model reply did not contain a parseable JSON object"):
        super().__init__(message, code="malformed_model_output")
