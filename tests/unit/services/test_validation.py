"""Property-based tests for upload validation.

Properties tested:
- Every allowed MIME type with size <= 50 MiB is accepted
- Any MIME type outside the allowed set is rejected
- Any size above 50 MiB is rejected
"""

from types import SimpleNamespace

from hypothesis import given, settings
from hypothesis import strategies as st

from gallery.enums import RejectionReason
from gallery.models.domain import UploadFile
from gallery.services.validation import DEFAULT_MAX_UPLOAD_BYTES, validate_upload

MAX = DEFAULT_MAX_UPLOAD_BYTES

allowed_types = st.sampled_from(["image/jpeg", "image/png", "image/webp", "image/heic"])

disallowed_types = st.one_of(
    st.sampled_from([
        "image/gif", "image/bmp", "image/svg+xml", "image/tiff", "image/heif",
        "application/pdf", "application/octet-stream", "text/plain", "video/mp4", "",
    ]),
    st.text(min_size=0, max_size=30).filter(
        lambda t: t.split(";", 1)[0].strip().lower()
        not in {"image/jpeg", "image/png", "image/webp", "image/heic"}
    ),
)

valid_sizes = st.integers(min_value=0, max_value=MAX)
oversized = st.integers(min_value=MAX + 1, max_value=MAX * 100)


def meta(content_type: str, size: int) -> SimpleNamespace:
    return SimpleNamespace(content_type=content_type, size=size)


class TestValidationProperties:
    @given(content_type=allowed_types, size=valid_sizes)
    @settings(max_examples=100)
    def test_allowed_type_within_limit_accepted(self, content_type, size):
        result = validate_upload(meta(content_type, size))

        assert result.valid is True
        assert result.reason is None
        assert result.error_message is None

    @given(content_type=disallowed_types, size=valid_sizes)
    @settings(max_examples=100)
    def test_disallowed_type_rejected(self, content_type, size):
        result = validate_upload(meta(content_type, size))

        assert result.valid is False
        assert result.reason == RejectionReason.UNSUPPORTED_TYPE

    @given(content_type=allowed_types, size=oversized)
    @settings(max_examples=100)
    def test_oversized_rejected(self, content_type, size):
        result = validate_upload(meta(content_type, size))

        assert result.valid is False
        assert result.reason == RejectionReason.TOO_LARGE

    @given(content_type=st.one_of(allowed_types, disallowed_types), size=st.integers(min_value=0, max_value=MAX * 2))
    @settings(max_examples=200)
    def test_accepts_exactly_allowed_type_and_size(self, content_type, size):
        expected = content_type in {
            "image/jpeg", "image/png", "image/webp", "image/heic",
        } and size <= MAX

        assert validate_upload(meta(content_type, size)).valid is expected


class TestValidationEdges:
    def test_boundary_size_accepted(self):
        assert validate_upload(meta("image/png", MAX)).valid is True

    def test_one_byte_over_rejected_with_message(self):
        result = validate_upload(meta("image/png", MAX + 1))

        assert result.error_message == "File size must be less than 50MB"

    def test_unsupported_type_message_lists_formats(self):
        result = validate_upload(meta("image/gif", 10))

        assert result.error_message == (
            "Please select a valid image file (JPEG, PNG, WebP, HEIC)"
        )

    def test_content_type_case_and_params_ignored(self):
        assert validate_upload(meta("IMAGE/PNG; charset=binary", 10)).valid is True

    def test_negative_size_rejected(self):
        result = validate_upload(meta("image/png", -1))

        assert result.valid is False
        assert result.reason == RejectionReason.INVALID_SIZE

    def test_custom_limits(self):
        result = validate_upload(
            meta("image/gif", 2048), allowed_types=["image/gif"], max_bytes=1024
        )

        assert result.reason == RejectionReason.TOO_LARGE
        assert result.error_message == "File size must be less than 1024 bytes"

    def test_upload_file_size_from_bytes(self):
        file = UploadFile(name="a.webp", content_type="image/webp", data=b"x" * 10)

        assert file.size == 10
        assert validate_upload(file).valid is True
