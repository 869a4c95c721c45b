"""Pydantic models for the gallery backend contract.

Request/response shapes mirror the backend JSON exactly (camelCase on the
wire). ``UploadFile`` is the only non-wire type: it stands in for the
browser ``File`` the upload flow starts from.
"""

import mimetypes
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from pydantic import Field, field_validator

from gallery.models.base import JsonModel

# Extensions stdlib mimetypes may not know about on every platform.
_EXTRA_IMAGE_TYPES = {
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".webp": "image/webp",
}


def normalize_mime_type(content_type: str | None) -> str:
    """Bare, lowercased MIME type: ``"Image/PNG; q=1"`` becomes ``"image/png"``."""
    return (content_type or "").split(";", 1)[0].strip().lower()


class ImageRecord(JsonModel):
    """Image metadata as stored by the backend.

    Created on ticket issuance; ``uploaded_at`` is only set once the upload
    has been confirmed.
    """

    id: str
    object_key: str
    original_name: str
    mime_type: str
    byte_size: int = Field(ge=0)
    uploaded_at: datetime | None = None
    status: str | None = None


class TransferInstructions(JsonModel):
    """How to transfer the bytes: a presigned request to replay verbatim."""

    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    expires_in_sec: int = Field(gt=0)


class UploadTicket(JsonModel):
    """Pending image record plus its single-use transfer instructions."""

    image: ImageRecord
    upload: TransferInstructions


class ViewUrlEntry(JsonModel):
    """A presigned, time-limited view URL for one image."""

    id: str
    url: str
    expires_at: datetime

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def is_expired(self, now: datetime) -> bool:
        """True once ``now`` has reached ``expires_at``."""
        return now >= self.expires_at


class ImageListPage(JsonModel):
    """One page of ``GET /images``."""

    items: list[ImageRecord] = Field(default_factory=list)
    next_cursor: str | None = None


class UploadRequest(JsonModel):
    """Body of ``POST /images/upload-request``."""

    file_name: str
    content_type: str
    file_size: int


class CompleteUploadRequest(JsonModel):
    """Body of ``POST /images/upload-complete``."""

    id: str
    object_key: str


class ViewUrlRequestItem(JsonModel):
    id: str


class ViewUrlsRequest(JsonModel):
    """Body of ``POST /images/view-urls``."""

    requests: list[ViewUrlRequestItem]
    ttl_sec: int | None = None

    @classmethod
    def for_ids(cls, ids: list[str], ttl_sec: int | None = None) -> "ViewUrlsRequest":
        return cls(requests=[ViewUrlRequestItem(id=i) for i in ids], ttl_sec=ttl_sec)


class ViewUrlsResponse(JsonModel):
    results: list[ViewUrlEntry] = Field(default_factory=list)


@dataclass
class UploadFile:
    """A file selected for upload.

    Attributes:
        name: Original filename sent to the backend.
        content_type: MIME type of the file.
        data: Raw file bytes, sent unmodified as the transfer body.
    """

    name: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "UploadFile":
        """Read a local file, guessing its MIME type from the extension.

        Args:
            path: Path of the file to read.
            content_type: Explicit MIME type; guessed when omitted.

        Returns:
            UploadFile holding the file's bytes.
        """
        p = Path(path)
        if content_type is None:
            guessed, _ = mimetypes.guess_type(p.name)
            content_type = guessed or _EXTRA_IMAGE_TYPES.get(
                p.suffix.lower(), "application/octet-stream"
            )
        return cls(name=p.name, content_type=content_type, data=p.read_bytes())
