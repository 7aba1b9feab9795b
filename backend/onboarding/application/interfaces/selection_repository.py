"""Abstract repository interface (port) for client ↔ catalog join tables."""

from abc import ABC, abstractmethod
from collections.abc import Collection

from onboarding.domain.entities import RelationKind


class SelectionRepository(ABC):
    """Port for the ServiceSelection / ProductSelection join rows."""

    @abstractmethod
    async def get_selected_ids(self, kind: RelationKind, client_id: int) -> set[int]:
        """Return the catalog ids currently linked to the client."""
        ...

    @abstractmethod
    async def delete_selected(
        self, kind: RelationKind, client_id: int, ids: Collection[int]
    ) -> None:
        """Remove the join rows for the given catalog ids."""
        ...

    @abstractmethod
    async def insert_selected(
        self, kind: RelationKind, client_id: int, ids: Collection[int]
    ) -> None:
        """Insert join rows, skipping pairs that already exist.

        Raises UnknownReferenceError when a catalog id does not exist.
        """
        ...
