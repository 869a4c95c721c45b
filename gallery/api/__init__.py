"""HTTP binding of the gallery backend."""

from gallery.api.client import GalleryApiClient

__all__ = ["GalleryApiClient"]
