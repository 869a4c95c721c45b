"""Presigned view-URL resolution with a lazy-expiry cache.

A gallery render asks for URLs for every visible image id. Ids with a live
cached URL are served locally; the rest are fetched in one batched call, so
each render costs at most one request no matter how many images it shows.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from gallery.api.client import GalleryApiClient
from gallery.clock import Clock, utc_now
from gallery.errors import ViewUrlFetchError
from gallery.services.state.view_url_cache import ViewUrlCache

logger = logging.getLogger(__name__)


@dataclass
class ViewUrlResolution:
    """Outcome of a ``resolve`` call.

    Attributes:
        urls: Image id to URL for every requested id that could be served.
        error: Set when the batch fetch failed; ``urls`` then holds only
            still-valid cached entries.
    """

    urls: dict[str, str] = field(default_factory=dict)
    error: ViewUrlFetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ViewUrlResolver:
    """Resolves image ids to presigned view URLs, caching until expiry."""

    def __init__(
        self,
        api: GalleryApiClient,
        *,
        clock: Clock = utc_now,
        cache: ViewUrlCache | None = None,
        ttl_sec: int | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            api: Backend client used for the batched view-url call.
            clock: Returns the current aware datetime.
            cache: Cache to use; a fresh one is created when omitted.
            ttl_sec: Requested URL lifetime; defaults to
                ``api.config.view_url_ttl_seconds``.
        """
        self.api = api
        self.clock = clock
        self.cache = cache if cache is not None else ViewUrlCache()
        self.ttl_sec = ttl_sec if ttl_sec is not None else api.config.view_url_ttl_seconds

    async def resolve(self, ids: Iterable[str]) -> ViewUrlResolution:
        """Return view URLs for ``ids``.

        Never raises for fetch failures: the failure is reported on the
        result and the caller gets whatever the cache could still serve.

        Args:
            ids: Image identifiers; duplicates are ignored.

        Returns:
            ViewUrlResolution with the available URLs. Ids the backend did
            not return are absent.
        """
        requested = list(dict.fromkeys(ids))
        now = self.clock()

        urls: dict[str, str] = {}
        missing: list[str] = []
        for image_id in requested:
            entry = self.cache.get_valid(image_id, now)
            if entry is None:
                missing.append(image_id)
            else:
                urls[image_id] = entry.url

        if not missing:
            return ViewUrlResolution(urls=urls)

        try:
            fetched = await self.api.fetch_view_urls(missing, ttl_sec=self.ttl_sec)
        except ViewUrlFetchError as e:
            logger.warning(
                "View URL fetch for %d image(s) failed; serving %d cached: %s",
                len(missing),
                len(urls),
                e,
            )
            return ViewUrlResolution(urls=urls, error=e)

        wanted = set(missing)
        now = self.clock()
        for entry in fetched:
            self.cache.put(entry)
            if entry.id in wanted and not entry.is_expired(now):
                urls[entry.id] = entry.url

        logger.debug(
            "Resolved %d view URL(s): %d cached, %d fetched of %d requested",
            len(urls),
            len(requested) - len(missing),
            len(fetched),
            len(missing),
        )
        return ViewUrlResolution(urls=urls)
