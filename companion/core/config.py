from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    log_level: str
    sentry_dsn: str | None
    ocr_language: str
    transcriber: str
    transcribe_model: str
    pipeline_config_path: str | None
    log_message_max_chars: int
    run_logging_enabled: bool


def load_settings() -> Settings:
    return Settings(
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        ocr_language=(_get_env("OCR_LANGUAGE", "eng") or "eng").strip(),
        transcriber=(_get_env("TRANSCRIBER", "placeholder") or "placeholder").strip().lower(),
        transcribe_model=(_get_env("OPENAI_TRANSCRIBE_MODEL", "whisper-1") or "whisper-1").strip(),
        pipeline_config_path=_get_env("PIPELINE_CONFIG_PATH"),
        log_message_max_chars=_get_env_int("LOG_MESSAGE_MAX_CHARS", 800),
        run_logging_enabled=_get_env_bool("RUN_LOGGING_ENABLED", True),
    )


settings = load_settings()

if settings.transcriber not in {"placeholder", "openai"}:
    raise RuntimeError("TRANSCRIBER must be either 'placeholder' or 'openai'.")
