"""Pre-upload file validation.

A pure classification of a file's MIME type and size. It never performs I/O,
so a rejected file never produces a network call.
"""

from collections.abc import Collection
from dataclasses import dataclass
from typing import Protocol

from gallery.config import DEFAULT_ALLOWED_MIME_TYPES
from gallery.enums import RejectionReason
from gallery.models.domain import normalize_mime_type

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024

# Display names for the file-picker message, keyed by MIME type.
_TYPE_LABELS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WebP",
    "image/heic": "HEIC",
}


class SizedFile(Protocol):
    """Anything with a MIME type and a byte size, e.g. ``UploadFile``."""

    @property
    def content_type(self) -> str: ...

    @property
    def size(self) -> int: ...


@dataclass(frozen=True)
class ValidationResult:
    """Result of file validation.

    Attributes:
        valid: Whether the file may be uploaded.
        reason: Machine-readable rejection reason if validation failed.
        error_message: Human-readable message if validation failed.
    """

    valid: bool
    reason: RejectionReason | None = None
    error_message: str | None = None


def _size_limit(max_bytes: int) -> str:
    mib = 1024 * 1024
    if max_bytes >= mib and max_bytes % mib == 0:
        return f"{max_bytes // mib}MB"
    return f"{max_bytes} bytes"


def _type_list(allowed_types: Collection[str]) -> str:
    return ", ".join(_TYPE_LABELS.get(t, t) for t in allowed_types)


def validate_upload(
    file: SizedFile,
    *,
    allowed_types: Collection[str] = DEFAULT_ALLOWED_MIME_TYPES,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> ValidationResult:
    """Check a file's MIME type and size before upload.

    Args:
        file: The candidate file.
        allowed_types: Accepted MIME types (compared case-insensitively).
        max_bytes: Largest accepted size in bytes, inclusive.

    Returns:
        ValidationResult; ``valid`` is True only when both checks pass.
    """
    content_type = normalize_mime_type(file.content_type)
    if content_type not in {t.lower() for t in allowed_types}:
        return ValidationResult(
            valid=False,
            reason=RejectionReason.UNSUPPORTED_TYPE,
            error_message=(
                f"Please select a valid image file ({_type_list(allowed_types)})"
            ),
        )

    if file.size < 0:
        return ValidationResult(
            valid=False,
            reason=RejectionReason.INVALID_SIZE,
            error_message="File size is invalid",
        )

    if file.size > max_bytes:
        return ValidationResult(
            valid=False,
            reason=RejectionReason.TOO_LARGE,
            error_message=f"File size must be less than {_size_limit(max_bytes)}",
        )

    return ValidationResult(valid=True)
