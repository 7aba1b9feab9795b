"""Abstract interface (port) for the external file-storage provider."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from onboarding.domain.entities import AttachmentUpload


class FileStorage(ABC):
    """Port for durable file storage: implemented in the infrastructure layer."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short name used in logs and errors."""
        ...

    @abstractmethod
    async def store_batch(self, files: Sequence[AttachmentUpload]) -> list[str]:
        """Store every file and return one durable URL per file, in input order.

        Raises UpstreamServiceError if any file of the batch fails.
        """
        ...

    @abstractmethod
    async def discard(self, urls: Sequence[str]) -> None:
        """Remove files previously returned by ``store_batch``.

        Used when the URLs could not be recorded. Missing files are ignored.
        """
        ...
