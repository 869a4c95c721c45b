"""Exception hierarchy for the gallery client.

Upload-phase errors are terminal for the session that raised them. The
orchestrator records them on the session instead of propagating them, so
that the caller always gets exactly one human-readable message per failed
attempt. Only ``InvalidInputError`` and ``BusyError`` are raised out of
``UploadOrchestrator.start``.
"""

from __future__ import annotations

from gallery.enums import RejectionReason


class GalleryError(Exception):
    """Base class for all gallery client errors."""

    pass


class InvalidInputError(GalleryError):
    """Raised when a file fails local validation. Never reaches the network."""

    def __init__(self, message: str, reason: RejectionReason | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class BusyError(GalleryError):
    """Raised when an upload is started while another one is in flight."""

    pass


class HttpExchangeError(GalleryError):
    """Common fields for errors wrapping a failed HTTP exchange."""

    default_message = "Request failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        detail: str | None = None,
        code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.request_id = request_id
        super().__init__(message or self._format())

    def _format(self) -> str:
        parts = [self.default_message]
        if self.status_code is not None:
            parts.append(f"(HTTP {self.status_code})")
        text = " ".join(parts)
        if self.detail:
            text = f"{text}: {self.detail}"
        return text


class UploadPhaseError(HttpExchangeError):
    """Base class for failures of one of the three upload phases."""

    pass


class TicketRequestError(UploadPhaseError):
    """The backend refused or failed to issue an upload ticket."""

    default_message = "Failed to get upload URL"


class StorageTransferError(UploadPhaseError):
    """The presigned transfer to object storage failed."""

    default_message = "Failed to upload file to storage"


class CompletionError(UploadPhaseError):
    """The backend did not confirm a transfer that already reached storage."""

    default_message = "Failed to complete upload"

    def _format(self) -> str:
        return (
            f"{super()._format()}. The file was transferred but is not "
            "marked as uploaded; upload it again to make it visible."
        )


class GalleryApiError(HttpExchangeError):
    """Base class for failures of the read-side gallery endpoints."""

    pass


class ViewUrlFetchError(GalleryApiError):
    """Batch view-url resolution failed. Callers degrade to cached URLs."""

    default_message = "Failed to fetch image URLs"


class ImageListError(GalleryApiError):
    """Listing images failed."""

    default_message = "Failed to fetch images"
