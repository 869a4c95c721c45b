"""Async client for a presigned-URL image gallery backend."""

from gallery.api.client import GalleryApiClient
from gallery.config import GalleryConfig
from gallery.enums import UploadPhase
from gallery.models.domain import ImageRecord, UploadFile, UploadTicket, ViewUrlEntry
from gallery.services import (
    GalleryPage,
    GalleryService,
    UploadOrchestrator,
    UploadSession,
    ViewUrlResolution,
    ViewUrlResolver,
)

__all__ = [
    "GalleryApiClient",
    "GalleryConfig",
    "GalleryPage",
    "GalleryService",
    "ImageRecord",
    "UploadFile",
    "UploadOrchestrator",
    "UploadPhase",
    "UploadSession",
    "UploadTicket",
    "ViewUrlEntry",
    "ViewUrlResolution",
    "ViewUrlResolver",
]
