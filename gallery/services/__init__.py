"""Gallery services package."""

from .gallery_service import GalleryPage, GalleryService
from .state import InvalidTransitionError, UploadSession, ViewUrlCache
from .upload_orchestrator import UploadOrchestrator
from .validation import ValidationResult, validate_upload
from .view_url_resolver import ViewUrlResolution, ViewUrlResolver

__all__ = [
    "GalleryPage",
    "GalleryService",
    "InvalidTransitionError",
    "UploadOrchestrator",
    "UploadSession",
    "ValidationResult",
    "ViewUrlCache",
    "ViewUrlResolution",
    "ViewUrlResolver",
    "validate_upload",
]
