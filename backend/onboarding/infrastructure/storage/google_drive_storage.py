"""Google Drive storage adapter: implements the FileStorage interface.

Uploads each file with a Drive v3 multipart request (httpx) authenticated
by a service-account bearer token (google-auth) and returns the public
download link ``https://drive.google.com/uc?id=<file id>``.
"""

import asyncio
import json
import logging
from collections.abc import Sequence
from typing import Any
from uuid import uuid4

import httpx
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from onboarding.application.interfaces import FileStorage
from onboarding.domain.entities import AttachmentUpload
from onboarding.domain.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]
_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
_FILES_URL = "https://www.googleapis.com/drive/v3/files"
_DOWNLOAD_URL = "https://drive.google.com/uc?id={file_id}"


class GoogleDriveFileStorage(FileStorage):
    """Infrastructure adapter: stores attachments in a Drive folder.

    ``credentials`` is any google-auth credentials object (``valid``,
    ``token``, ``refresh(request)``).
    """

    def __init__(
        self,
        credentials: Any,
        folder_id: str = "",
        http_client: httpx.AsyncClient | None = None,
    ):
        self._credentials = credentials
        self._folder_id = folder_id
        self._http_client = http_client

    @classmethod
    def from_service_account_info(
        cls, info: dict, folder_id: str = "", **kwargs: Any
    ) -> "GoogleDriveFileStorage":
        credentials = service_account.Credentials.from_service_account_info(
            info, scopes=DRIVE_SCOPES
        )
        return cls(credentials, folder_id, **kwargs)

    @property
    def provider_name(self) -> str:
        return "google_drive"

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=120.0)

    async def _access_token(self) -> str:
        if not self._credentials.valid:
            try:
                # google-auth refresh is blocking
                await asyncio.to_thread(self._credentials.refresh, GoogleAuthRequest())
            except Exception as exc:
                raise UpstreamServiceError(
                    self.provider_name, f"credential refresh failed: {exc}"
                ) from exc
        return self._credentials.token

    def _build_multipart(self, upload: AttachmentUpload, content: bytes) -> tuple[bytes, str]:
        """Build a multipart/related body: JSON metadata part, then media part."""
        metadata: dict[str, Any] = {"name": upload.filename, "mimeType": upload.mime_type}
        if self._folder_id:
            metadata["parents"] = [self._folder_id]

        boundary = uuid4().hex
        head = (
            f"--{boundary}\r\n"
            "Content-Type: application/json; charset=UTF-8\r\n\r\n"
            f"{json.dumps(metadata)}\r\n"
            f"--{boundary}\r\n"
            f"Content-Type: {upload.mime_type}\r\n\r\n"
        ).encode("utf-8")
        tail = f"\r\n--{boundary}--\r\n".encode("utf-8")
        return head + content + tail, f"multipart/related; boundary={boundary}"

    async def _upload_one(
        self, client: httpx.AsyncClient, token: str, upload: AttachmentUpload
    ) -> str:
        body, content_type = self._build_multipart(upload, upload.read())
        try:
            response = await client.post(
                _UPLOAD_URL,
                params={"uploadType": "multipart", "fields": "id", "supportsAllDrives": "true"},
                headers={"Authorization": f"Bearer {token}", "Content-Type": content_type},
                content=body,
            )
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(
                self.provider_name, f"upload of '{upload.filename}' failed: {exc}"
            ) from exc

        if response.status_code >= 400:
            raise UpstreamServiceError(
                self.provider_name,
                f"upload of '{upload.filename}' returned {response.status_code}: {response.text[:200]}",
            )

        file_id = response.json().get("id")
        if not file_id:
            raise UpstreamServiceError(
                self.provider_name, f"upload of '{upload.filename}' returned no file id"
            )
        logger.info("Uploaded '%s' to Google Drive as %s", upload.filename, file_id)
        return file_id

    async def _delete_quietly(self, client: httpx.AsyncClient, token: str, file_id: str) -> None:
        try:
            await client.delete(
                f"{_FILES_URL}/{file_id}",
                params={"supportsAllDrives": "true"},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Could not remove orphaned Drive file %s: %s", file_id, exc)

    async def store_batch(self, files: Sequence[AttachmentUpload]) -> list[str]:
        token = await self._access_token()
        client = await self._get_client()
        should_close = self._http_client is None

        file_ids: list[str] = []
        try:
            try:
                for upload in files:
                    file_ids.append(await self._upload_one(client, token, upload))
            except UpstreamServiceError:
                for file_id in file_ids:
                    await self._delete_quietly(client, token, file_id)
                raise
        finally:
            if should_close:
                await client.aclose()

        return [_DOWNLOAD_URL.format(file_id=file_id) for file_id in file_ids]

    async def discard(self, urls: Sequence[str]) -> None:
        prefix = _DOWNLOAD_URL.format(file_id="")
        file_ids = [url[len(prefix):] for url in urls if url.startswith(prefix)]
        if not file_ids:
            return

        token = await self._access_token()
        client = await self._get_client()
        should_close = self._http_client is None
        try:
            for file_id in file_ids:
                await self._delete_quietly(client, token, file_id)
        finally:
            if should_close:
                await client.aclose()
