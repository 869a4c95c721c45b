"""Logging helpers and filters.

httpx logs every request line at INFO, including the full presigned URL of
the storage transfer. These filters make sure signatures never reach a log
handler regardless of which logger emitted them.
"""

from __future__ import annotations

import logging

from gallery.observability.redaction import redact_text


class RedactPresignedUrlFilter(logging.Filter):
    """Rewrite log records so presigned URL signatures are redacted.

    The record message is formatted eagerly and its args cleared, so
    handlers further down the chain only ever see the redacted text.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (filter)
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Malformed %-args; leave the record for the handler to report.
            return True

        redacted = redact_text(message, max_chars=0)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def _add_once(target: logging.Logger | logging.Handler) -> None:
    if any(isinstance(f, RedactPresignedUrlFilter) for f in target.filters):
        return
    target.addFilter(RedactPresignedUrlFilter())


def install_redaction_filters() -> None:
    """Install the redaction filter on root handlers and HTTP client loggers.

    Logger-level filters only see records created on that exact logger, so
    the filter goes on every root handler (covers ``gallery.*`` and anything
    else that propagates) plus the ``httpx``/``httpcore`` loggers directly.

    Safe to call multiple times.
    """

    for handler in logging.getLogger().handlers:
        _add_once(handler)
    for name in ("httpx", "httpcore"):
        _add_once(logging.getLogger(name))
