"""Unit tests for the Google Drive storage adapter using a mocked transport."""

import json
from io import BytesIO

import httpx
import pytest

from onboarding.domain.entities import AttachmentUpload
from onboarding.domain.exceptions import UpstreamServiceError
from onboarding.infrastructure.storage.google_drive_storage import GoogleDriveFileStorage


class StubCredentials:
    def __init__(self, valid: bool = True):
        self.valid = valid
        self.token = "token-abc"
        self.refreshed = 0

    def refresh(self, request):
        self.refreshed += 1
        self.valid = True


class FakeDrive:
    """Records requests and answers like the Drive v3 API."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.uploads: list[httpx.Request] = []
        self.deleted: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            self.deleted.append(request.url.path.rsplit("/", 1)[1])
            return httpx.Response(204)
        self.uploads.append(request)
        if self.fail_on and self.fail_on.encode() in request.content:
            return httpx.Response(403, json={"error": {"message": "quota exceeded"}})
        return httpx.Response(200, json={"id": f"file-{len(self.uploads)}"})


def _upload(name: str) -> AttachmentUpload:
    return AttachmentUpload(filename=name, mime_type="image/png", stream=BytesIO(b"\x89PNG"))


def _storage(drive: FakeDrive, credentials=None) -> GoogleDriveFileStorage:
    client = httpx.AsyncClient(transport=httpx.MockTransport(drive.handler))
    return GoogleDriveFileStorage(
        credentials or StubCredentials(), folder_id="folder-1", http_client=client
    )


@pytest.mark.asyncio
async def test_store_batch_returns_download_links_in_order():
    drive = FakeDrive()
    urls = await _storage(drive).store_batch([_upload("a.png"), _upload("b.png")])

    assert urls == [
        "https://drive.google.com/uc?id=file-1",
        "https://drive.google.com/uc?id=file-2",
    ]
    first = drive.uploads[0]
    assert first.headers["Authorization"] == "Bearer token-abc"
    assert first.headers["Content-Type"].startswith("multipart/related; boundary=")
    assert first.url.params["uploadType"] == "multipart"


@pytest.mark.asyncio
async def test_metadata_part_names_file_and_folder():
    drive = FakeDrive()
    await _storage(drive).store_batch([_upload("front.png")])

    body = drive.uploads[0].content.decode("latin-1")
    metadata = json.loads(body.split("\r\n\r\n", 1)[1].split("\r\n", 1)[0])
    assert metadata == {"name": "front.png", "mimeType": "image/png", "parents": ["folder-1"]}


@pytest.mark.asyncio
async def test_failed_upload_removes_earlier_files():
    drive = FakeDrive(fail_on="b.png")

    with pytest.raises(UpstreamServiceError) as exc_info:
        await _storage(drive).store_batch([_upload("a.png"), _upload("b.png")])

    assert "403" in str(exc_info.value)
    assert drive.deleted == ["file-1"]


@pytest.mark.asyncio
async def test_expired_credentials_are_refreshed():
    drive = FakeDrive()
    credentials = StubCredentials(valid=False)
    await _storage(drive, credentials).store_batch([_upload("a.png")])
    assert credentials.refreshed == 1


def test_provider_name():
    assert _storage(FakeDrive()).provider_name == "google_drive"


@pytest.mark.asyncio
async def test_discard_deletes_drive_files():
    drive = FakeDrive()
    await _storage(drive).discard(
        ["https://drive.google.com/uc?id=file-7", "https://elsewhere.example/x"]
    )
    assert drive.deleted == ["file-7"]
