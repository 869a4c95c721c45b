"""Redaction helpers to keep presigned credentials out of logs.

Presigned URLs carry their signature (and often a session token) in the
query string; anyone holding the full URL can use it until it expires.
Headers on a ticket may carry signed values too.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from urllib.parse import urlsplit, urlunsplit

_REPLACEMENT = "[REDACTED]"
_TRUNC_SUFFIX = "…(truncated)"

# Query parameters that make a URL a bearer credential.
_SIGNED_QUERY_KEYS = {
    "x-amz-signature",
    "x-amz-credential",
    "x-amz-security-token",
    "signature",
    "sig",
    "awsaccesskeyid",
    "x-goog-signature",
    "x-goog-credential",
}

_SECRET_HEADER_RE = re.compile(
    r"(^|-)(authorization|token|signature|credential|secret)($|-)",
    flags=re.IGNORECASE,
)

# Signed query parameters inside free text (log messages, error strings).
_SIGNED_PARAM_RE = re.compile(
    r"(?<![\w-])(?P<key>X-Amz-Signature|X-Amz-Credential|X-Amz-Security-Token|X-Goog-Signature"
    r"|X-Goog-Credential|AWSAccessKeyId|Signature|sig)=(?P<value>[^&\s\"']+)",
    flags=re.IGNORECASE,
)


def redact_url(url: str) -> str:
    """Return ``url`` with signed query parameter values replaced."""
    if not url:
        return url

    parts = urlsplit(url)
    if not parts.query:
        return url

    params = []
    for pair in parts.query.split("&"):
        key, sep, value = pair.partition("=")
        if sep and key.lower() in _SIGNED_QUERY_KEYS:
            value = _REPLACEMENT
        params.append(f"{key}{sep}{value}")
    return urlunsplit(parts._replace(query="&".join(params)))


def redact_text(text: str, *, max_chars: int = 4000) -> str:
    """Redact signed query parameters embedded in a text blob and truncate."""
    if not text:
        return text

    out = _SIGNED_PARAM_RE.sub(lambda m: f"{m.group('key')}={_REPLACEMENT}", text)

    if max_chars and len(out) > max_chars:
        out = out[:max_chars] + _TRUNC_SUFFIX

    return out


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy of ``headers`` with credential-like values redacted."""
    return {
        str(k): (_REPLACEMENT if _SECRET_HEADER_RE.search(str(k)) else str(v))
        for k, v in headers.items()
    }
