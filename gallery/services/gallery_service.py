"""Gallery use case: list images and resolve their view URLs."""

import logging
from dataclasses import dataclass, field

from gallery.api.client import GalleryApiClient
from gallery.enums import UploadPhase
from gallery.errors import ViewUrlFetchError
from gallery.models.domain import ImageRecord, UploadFile
from gallery.services.state.upload_session import UploadSession
from gallery.services.upload_orchestrator import UploadOrchestrator
from gallery.services.view_url_resolver import ViewUrlResolver

logger = logging.getLogger(__name__)


@dataclass
class GalleryPage:
    """One rendered page of the gallery.

    Attributes:
        items: Image records, newest first.
        urls: Image id to presigned view URL; images without one show no preview.
        next_cursor: Cursor for the following page, if any.
        view_url_error: Set when view URLs could not be fetched.
    """

    items: list[ImageRecord] = field(default_factory=list)
    urls: dict[str, str] = field(default_factory=dict)
    next_cursor: str | None = None
    view_url_error: ViewUrlFetchError | None = None

    def url_for(self, image: ImageRecord) -> str | None:
        return self.urls.get(image.id)


class GalleryService:
    """Ties listing, view-url resolution, and uploads together.

    After a successful upload the first page is reloaded so the new image's
    id goes back through the resolver.
    """

    def __init__(
        self,
        api: GalleryApiClient,
        resolver: ViewUrlResolver | None = None,
        orchestrator: UploadOrchestrator | None = None,
    ) -> None:
        self.api = api
        self.resolver = resolver or ViewUrlResolver(api)
        self.orchestrator = orchestrator or UploadOrchestrator(api)

    async def load(self, limit: int | None = None, cursor: str | None = None) -> GalleryPage:
        """Fetch one page of images with their view URLs.

        Raises:
            ImageListError: If listing failed. View URL failures do not raise.
        """
        listing = await self.api.list_images(limit=limit, cursor=cursor)
        page = GalleryPage(items=list(listing.items), next_cursor=listing.next_cursor)
        if not page.items:
            return page

        resolution = await self.resolver.resolve(image.id for image in page.items)
        page.urls = resolution.urls
        page.view_url_error = resolution.error
        return page

    async def upload(
        self, file: UploadFile, limit: int | None = None
    ) -> tuple[UploadSession, GalleryPage | None]:
        """Upload ``file`` and reload the first page on success.

        Returns:
            The final upload session, and the refreshed page when the upload
            reached ``done`` (None otherwise).

        Raises:
            BusyError: If an upload is already in flight.
            InvalidInputError: If the file fails validation.
            ImageListError: If the reload after a successful upload failed.
        """
        session = await self.orchestrator.start(file)
        if session.phase != UploadPhase.DONE:
            return session, None

        logger.debug("Reloading gallery after upload of %s", file.name)
        return session, await self.load(limit=limit)
