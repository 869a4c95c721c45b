"""State holders owned by the gallery services."""

from gallery.services.state.upload_session import (
    InvalidTransitionError,
    UploadSession,
)
from gallery.services.state.view_url_cache import ViewUrlCache

__all__ = [
    "InvalidTransitionError",
    "UploadSession",
    "ViewUrlCache",
]
