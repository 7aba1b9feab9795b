"""Abstract repository interface (port) for Client persistence."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from onboarding.domain.entities import AttachmentKind, ClientProfile


class ClientRepository(ABC):
    """Port for client persistence: implemented in the infrastructure layer."""

    @abstractmethod
    async def get_profile(self, client_id: int) -> ClientProfile | None:
        """Retrieve the assembled profile of a client, or None if missing."""
        ...

    @abstractmethod
    async def exists(self, client_id: int) -> bool:
        """Return True when the client row exists."""
        ...

    @abstractmethod
    async def update_fields(self, client_id: int, changes: Mapping[str, Any]) -> None:
        """Apply column changes and stamp ``last_active`` in the same statement.

        An empty mapping only stamps ``last_active``.
        Raises UnknownReferenceError when the client does not exist.
        """
        ...

    @abstractmethod
    async def get_manager_id(self, client_id: int) -> int:
        """Return the id of the Account managing the client."""
        ...

    @abstractmethod
    async def append_attachments(
        self, client_id: int, kind: AttachmentKind, urls: Sequence[str]
    ) -> list[str]:
        """Append URLs to the end of the stored list and return the new list."""
        ...
