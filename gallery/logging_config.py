"""Centralized logging setup for applications embedding the gallery client."""

import logging
import sys

from gallery.config import GalleryConfig
from gallery.logging_filters import install_redaction_filters

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger. Call once at startup.

    Args:
        level: Log level name, e.g. "DEBUG" or "INFO". Defaults to
            ``GalleryConfig().log_level`` (``GALLERY_LOG_LEVEL``). Unknown
            names fall back to INFO.
    """
    level = level or GalleryConfig().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # basicConfig is a no-op when the root logger already has handlers
    logging.getLogger().setLevel(log_level)

    # Suppress verbose per-request logs from the HTTP client
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    install_redaction_filters()
