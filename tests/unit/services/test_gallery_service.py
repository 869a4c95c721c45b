"""Tests for GalleryService: listing with view URLs and reload after upload."""

import pytest

from gallery.enums import UploadPhase
from gallery.errors import ImageListError
from gallery.models.domain import UploadFile
from gallery.services.gallery_service import GalleryService
from gallery.services.view_url_resolver import ViewUrlResolver
from tests.fakes import FakeBackend

IMAGES = {
    "items": [
        {
            "id": "img2",
            "objectKey": "images/2026/10/img2.png",
            "originalName": "dog.png",
            "mimeType": "image/png",
            "byteSize": 2048,
            "uploadedAt": "2026-10-19T11:00:00Z",
        },
        {
            "id": "img1",
            "objectKey": "images/2026/10/img1.jpg",
            "originalName": "cat.jpg",
            "mimeType": "image/jpeg",
            "byteSize": 1024,
        },
    ],
    "nextCursor": "2026-10-19T10:00:00Z",
}


@pytest.fixture
def service(api, clock) -> GalleryService:
    return GalleryService(api, resolver=ViewUrlResolver(api, clock=clock))


async def test_load_lists_and_resolves(service, backend: FakeBackend):
    backend.respond("GET", "/images", json=IMAGES)

    page = await service.load()

    assert [i.id for i in page.items] == ["img2", "img1"]
    assert page.next_cursor == "2026-10-19T10:00:00Z"
    assert page.view_url_error is None
    assert page.url_for(page.items[0]).startswith("https://cdn.test/img2")
    assert page.items[1].uploaded_at is None
    assert len(backend.calls("POST", "/images/view-urls")) == 1


async def test_load_passes_limit_and_cursor(service, backend):
    await service.load(limit=10, cursor="abc")

    [call] = backend.calls("GET", "/images")
    assert call.url.params["limit"] == "10"
    assert call.url.params["cursor"] == "abc"


async def test_empty_gallery_skips_view_urls(service, backend):
    page = await service.load()

    assert page.items == []
    assert backend.calls("POST", "/images/view-urls") == []


async def test_view_url_failure_keeps_items(service, backend):
    backend.respond("GET", "/images", json=IMAGES)
    backend.respond("POST", "/images/view-urls", status=500)

    page = await service.load()

    assert len(page.items) == 2
    assert page.urls == {}
    assert page.view_url_error is not None


async def test_list_failure_raises(service, backend):
    backend.respond(
        "GET",
        "/images",
        status=500,
        json={"error": {"code": "InternalError", "message": "Database error"}},
    )

    with pytest.raises(ImageListError) as exc:
        await service.load()

    assert exc.value.detail == "Database error"
    assert str(exc.value) == "Failed to fetch images (HTTP 500): Database error"


async def test_upload_reloads_gallery(service, backend):
    backend.respond("GET", "/images", json=IMAGES)
    file = UploadFile(name="cat.png", content_type="image/png", data=b"1234")

    session, page = await service.upload(file)

    assert session.phase == UploadPhase.DONE
    assert page is not None
    assert len(backend.calls("GET", "/images")) == 1
    # The listing happens strictly after confirmation.
    paths = [r.url.path for r in backend.requests]
    assert paths.index("/images") > paths.index("/images/upload-complete")


async def test_failed_upload_does_not_reload(service, backend):
    backend.respond("PUT", "/x", status=403)
    file = UploadFile(name="cat.png", content_type="image/png", data=b"1234")

    session, page = await service.upload(file)

    assert session.phase == UploadPhase.FAILED
    assert page is None
    assert backend.calls("GET", "/images") == []
