"""Wire and domain models."""

from gallery.models.base import JsonModel
from gallery.models.domain import (
    CompleteUploadRequest,
    ImageListPage,
    ImageRecord,
    TransferInstructions,
    UploadFile,
    UploadRequest,
    UploadTicket,
    ViewUrlEntry,
    ViewUrlsRequest,
    ViewUrlsResponse,
    normalize_mime_type,
)

__all__ = [
    "CompleteUploadRequest",
    "ImageListPage",
    "ImageRecord",
    "JsonModel",
    "TransferInstructions",
    "UploadFile",
    "UploadRequest",
    "UploadTicket",
    "ViewUrlEntry",
    "ViewUrlsRequest",
    "ViewUrlsResponse",
    "normalize_mime_type",
]
