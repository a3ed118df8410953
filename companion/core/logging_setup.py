from __future__ import annotations

import logging

import sentry_sdk

from companion.core.config import Settings, settings as default_settings


def configure_logging(settings: Settings | None = None) -> None:
    cfg = settings or default_settings
    logging.basicConfig(level=cfg.log_level, format="%(message)s")
    if cfg.sentry_dsn:
        sentry_sdk.init(dsn=cfg.sentry_dsn)
