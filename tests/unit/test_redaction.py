"""Tests for presigned-credential redaction helpers."""

from hypothesis import given
from hypothesis import strategies as st

from gallery.observability.redaction import redact_text, redact_url, sanitize_headers

SIGNED = (
    "https://bucket.s3.amazonaws.com/images/a.png"
    "?X-Amz-Algorithm=AWS4-HMAC-SHA256&X-Amz-Credential=AKIA%2F20261019"
    "&X-Amz-Expires=300&X-Amz-Signature=deadbeef"
)


def test_redact_url_masks_signed_params_only():
    out = redact_url(SIGNED)

    assert "deadbeef" not in out
    assert "AKIA" not in out
    assert "X-Amz-Expires=300" in out
    assert "X-Amz-Algorithm=AWS4-HMAC-SHA256" in out
    assert out.startswith("https://bucket.s3.amazonaws.com/images/a.png?")


def test_redact_url_without_query_unchanged():
    assert redact_url("https://cdn.test/a.png") == "https://cdn.test/a.png"
    assert redact_url("") == ""


def test_redact_text_inside_message():
    text = f'HTTP Request: PUT {SIGNED} "HTTP/1.1 403 Forbidden"'

    out = redact_text(text)

    assert "deadbeef" not in out
    assert "X-Amz-Signature=[REDACTED]" in out
    assert out.endswith('"HTTP/1.1 403 Forbidden"')


def test_redact_text_ignores_lookalike_keys():
    assert redact_text("my-sig=keep design=keep") == "my-sig=keep design=keep"


def test_redact_text_truncates():
    out = redact_text("a" * 50, max_chars=10)

    assert out == "a" * 10 + "…(truncated)"
    assert redact_text("a" * 50, max_chars=0) == "a" * 50


def test_sanitize_headers():
    headers = {
        "Content-Type": "image/png",
        "Authorization": "Bearer abc",
        "x-amz-security-token": "tok",
        "x-amz-meta-origin": "gallery",
    }

    assert sanitize_headers(headers) == {
        "Content-Type": "image/png",
        "Authorization": "[REDACTED]",
        "x-amz-security-token": "[REDACTED]",
        "x-amz-meta-origin": "gallery",
    }


@given(st.text(alphabet="abcdefXYZ0123456789%-_.~", min_size=1))
def test_signature_value_never_survives(secret):
    url = f"https://s3/x?X-Amz-Signature={secret}"

    assert redact_url(url) == "https://s3/x?X-Amz-Signature=[REDACTED]"
    assert redact_text(url) == "https://s3/x?X-Amz-Signature=[REDACTED]"
