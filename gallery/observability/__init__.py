"""Observability utilities (log redaction)."""

from gallery.observability.redaction import redact_text, redact_url, sanitize_headers

__all__ = [
    "redact_text",
    "redact_url",
    "sanitize_headers",
]
