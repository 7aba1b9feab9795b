"""Local filesystem storage for client attachments.

Storage layout:
    <upload_dir>/attachments/<stem>_<YYYYMMDD_HHmmss>_<token>.<ext>

Files are served by the app under ``/files`` so every stored file has a
durable URL: ``<public_base_url>/files/attachments/<name>``.
"""

import logging
import mimetypes
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from onboarding.application.interfaces import FileStorage
from onboarding.domain.entities import AttachmentUpload
from onboarding.domain.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

ATTACHMENTS_SUBDIR = "attachments"


@dataclass
class StoredFile:
    """Result of storing a single file on disk."""

    stored_path: str
    filename: str
    original_name: str
    file_size: int
    mime_type: str


def _datetime_stamp() -> str:
    """Return a UTC datetime stamp suitable for filenames: YYYYMMDD_HHmmss."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


class LocalFileStorage(FileStorage):
    """Infrastructure adapter for local file storage."""

    def __init__(self, upload_dir: str, public_base_url: str):
        self._upload_dir = Path(upload_dir)
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def provider_name(self) -> str:
        return "local"

    async def store_file(
        self, content: bytes, filename: str, mime_type: str | None = None
    ) -> StoredFile:
        """Store one file in ``<upload_dir>/attachments/``.

        The filename is augmented with a UTC datetime stamp and a random
        token so two uploads of the same name never collide.
        """
        files_dir = self._upload_dir / ATTACHMENTS_SUBDIR
        files_dir.mkdir(parents=True, exist_ok=True)

        stem = Path(filename).stem
        suffix = Path(filename).suffix  # includes the dot
        stamped_name = f"{_sanitise(stem)}_{_datetime_stamp()}_{uuid4().hex[:8]}{suffix}"

        dest_path = files_dir / stamped_name
        dest_path.write_bytes(content)

        if not mime_type:
            mime_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

        logger.info("Stored file: %s (%d bytes)", dest_path, len(content))

        return StoredFile(
            stored_path=str(dest_path),
            filename=stamped_name,
            original_name=filename,
            file_size=len(content),
            mime_type=mime_type,
        )

    def public_url(self, stored: StoredFile) -> str:
        return f"{self._public_base_url}/files/{ATTACHMENTS_SUBDIR}/{stored.filename}"

    async def store_batch(self, files: Sequence[AttachmentUpload]) -> list[str]:
        """Store every file or none: a failure removes what this batch wrote."""
        stored: list[StoredFile] = []
        try:
            for upload in files:
                content = upload.read()
                if not content:
                    raise UpstreamServiceError(self.provider_name, f"'{upload.filename}' is empty")
                stored.append(await self.store_file(content, upload.filename, upload.mime_type))
        except OSError as exc:
            await self._discard(stored)
            raise UpstreamServiceError(self.provider_name, f"write failed: {exc}") from exc
        except UpstreamServiceError:
            await self._discard(stored)
            raise

        return [self.public_url(s) for s in stored]

    async def _discard(self, stored: list[StoredFile]) -> None:
        for item in stored:
            await self.delete_file(item.stored_path)

    async def discard(self, urls: Sequence[str]) -> None:
        prefix = f"{self._public_base_url}/files/{ATTACHMENTS_SUBDIR}/"
        for url in urls:
            if not url.startswith(prefix):
                logger.warning("Not discarding %s: not a local attachment URL", url)
                continue
            name = Path(url[len(prefix):]).name
            await self.delete_file(str(self._upload_dir / ATTACHMENTS_SUBDIR / name))

    def file_exists(self, stored_path: str) -> bool:
        """Check if a stored file exists."""
        return Path(stored_path).exists()

    async def delete_file(self, stored_path: str) -> bool:
        """Delete a stored file from disk.

        Returns True if successfully deleted, False if not found.
        """
        file_path = Path(stored_path)
        if not file_path.exists():
            return False

        file_path.unlink(missing_ok=True)
        logger.info("Deleted file from disk: %s", stored_path)
        return True
