"""HTTP binding of the gallery backend contract.

Two httpx clients are used: one bound to the backend base URL for the JSON
endpoints, and a bare one for the presigned storage transfer. The storage
request must go out with exactly the ticket's headers, so it never shares a
client that may carry backend-specific defaults (auth, base headers).
"""

from __future__ import annotations

import logging
import re
from typing import Any, TypeVar

import httpx

from gallery.config import GalleryConfig
from gallery.errors import (
    CompletionError,
    HttpExchangeError,
    ImageListError,
    StorageTransferError,
    TicketRequestError,
    ViewUrlFetchError,
)
from gallery.models.domain import (
    CompleteUploadRequest,
    ImageListPage,
    ImageRecord,
    UploadFile,
    UploadRequest,
    UploadTicket,
    ViewUrlEntry,
    ViewUrlsRequest,
    ViewUrlsResponse,
    normalize_mime_type,
)
from gallery.observability.redaction import redact_text, redact_url, sanitize_headers

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=HttpExchangeError)

UPLOAD_REQUEST_PATH = "/images/upload-request"
UPLOAD_COMPLETE_PATH = "/images/upload-complete"
VIEW_URLS_PATH = "/images/view-urls"
IMAGES_PATH = "/images"

# Object stores answer errors with XML, e.g. <Code>AccessDenied</Code>.
_XML_CODE_RE = re.compile(r"<Code>([^<]+)</Code>")
_XML_MESSAGE_RE = re.compile(r"<Message>([^<]+)</Message>")


def _error_from_response(error_cls: type[E], response: httpx.Response) -> E:
    """Build a typed error from a non-2xx response.

    Understands the backend's ``{"error": {"code", "message", "requestId"}}``
    envelope and the XML error documents returned by S3-compatible storage.
    Anything else yields an error carrying only the status code.
    """
    code: str | None = None
    detail: str | None = None
    request_id: str | None = None

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            body: Any = response.json()
        except ValueError:
            body = None
        err = body.get("error") if isinstance(body, dict) else None
        if isinstance(err, dict):
            code = err.get("code") or None
            detail = err.get("message") or None
            request_id = err.get("requestId") or None
    elif "xml" in content_type:
        text = response.text
        if m := _XML_CODE_RE.search(text):
            code = m.group(1)
        if m := _XML_MESSAGE_RE.search(text):
            detail = m.group(1)

    return error_cls(
        status_code=response.status_code,
        detail=detail,
        code=code,
        request_id=request_id,
    )


class GalleryApiClient:
    """Typed async client for the gallery backend and presigned storage.

    Every method raises the phase-specific error from ``gallery.errors`` on
    transport failures, non-2xx responses, and malformed bodies.
    """

    def __init__(
        self,
        config: GalleryConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        storage_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            config: Client configuration; loaded from the environment when omitted.
            http_client: Client for backend calls. Must have ``base_url`` set.
                Created from ``config`` when omitted.
            storage_client: Client for presigned storage transfers. Created
                without default headers when omitted.
        """
        self.config = config or GalleryConfig()
        timeout = httpx.Timeout(self.config.http_timeout_seconds)

        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.config.api_base_url, timeout=timeout
        )
        self._owns_storage = storage_client is None
        self._storage = storage_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "GalleryApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the httpx clients this instance created."""
        if self._owns_http:
            await self._http.aclose()
        if self._owns_storage:
            await self._storage.aclose()

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        error_cls: type[E],
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise error_cls(detail=redact_text(str(e)) or type(e).__name__) from e

        if not response.is_success:
            raise _error_from_response(error_cls, response)
        return response

    @staticmethod
    def _parse(response: httpx.Response, model: Any, error_cls: type[E]) -> Any:
        try:
            return model.model_validate(response.json())
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError both land here.
            raise error_cls(
                status_code=response.status_code,
                detail="Malformed response body",
            ) from e

    async def request_upload(self, file: UploadFile) -> UploadTicket:
        """Ask the backend for a single-use upload ticket.

        Args:
            file: File about to be uploaded; only its metadata is sent. The
                content type goes out in the same normalized form that
                validation checked.

        Returns:
            UploadTicket with the pending image record and transfer instructions.

        Raises:
            TicketRequestError: If the ticket could not be obtained.
        """
        body = UploadRequest(
            file_name=file.name,
            content_type=normalize_mime_type(file.content_type),
            file_size=file.size,
        )
        response = await self._send(
            self._http,
            "POST",
            UPLOAD_REQUEST_PATH,
            TicketRequestError,
            json=body.to_wire(),
        )
        ticket = self._parse(response, UploadTicket, TicketRequestError)
        logger.debug(
            "Issued ticket for image %s (%s %s, expires in %ss)",
            ticket.image.id,
            ticket.upload.method,
            redact_url(ticket.upload.url),
            ticket.upload.expires_in_sec,
        )
        return ticket

    async def transfer(self, ticket: UploadTicket, data: bytes) -> None:
        """Replay the ticket's presigned request with ``data`` as the body.

        Method, URL, and headers are used exactly as issued; altering any of
        them would invalidate the signature.

        Raises:
            StorageTransferError: If storage did not answer with a 2xx.
        """
        instructions = ticket.upload
        logger.debug(
            "Transferring %d bytes: %s %s headers=%s",
            len(data),
            instructions.method,
            redact_url(instructions.url),
            sanitize_headers(instructions.headers),
        )
        await self._send(
            self._storage,
            instructions.method,
            instructions.url,
            StorageTransferError,
            headers=dict(instructions.headers),
            content=data,
        )

    async def complete_upload(self, image: ImageRecord) -> None:
        """Tell the backend the bytes for ``image`` are in storage.

        Raises:
            CompletionError: If the backend did not confirm.
        """
        body = CompleteUploadRequest(id=image.id, object_key=image.object_key)
        await self._send(
            self._http,
            "POST",
            UPLOAD_COMPLETE_PATH,
            CompletionError,
            json=body.to_wire(),
        )

    async def fetch_view_urls(
        self, ids: list[str], ttl_sec: int | None = None
    ) -> list[ViewUrlEntry]:
        """Fetch presigned view URLs for ``ids`` in a single request.

        Raises:
            ViewUrlFetchError: If the batch request failed.
        """
        body = ViewUrlsRequest.for_ids(ids, ttl_sec=ttl_sec)
        response = await self._send(
            self._http,
            "POST",
            VIEW_URLS_PATH,
            ViewUrlFetchError,
            json=body.to_wire(),
        )
        parsed = self._parse(response, ViewUrlsResponse, ViewUrlFetchError)
        return list(parsed.results)

    async def list_images(
        self, limit: int | None = None, cursor: str | None = None
    ) -> ImageListPage:
        """Fetch one page of uploaded images, newest first.

        Raises:
            ImageListError: If listing failed.
        """
        params: dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor

        response = await self._send(
            self._http, "GET", IMAGES_PATH, ImageListError, params=params
        )
        return self._parse(response, ImageListPage, ImageListError)
