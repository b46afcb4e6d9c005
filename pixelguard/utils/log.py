"""Logging configuration for the command line and desktop entry points."""

from __future__ import annotations

import logging

from pixelguard.config.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger; `level` overrides the configured one."""

    name = level or get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, name.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
