"""Abstract repository interface (port) for Account persistence."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class AccountRepository(ABC):
    """Port for the staff accounts that manage clients."""

    @abstractmethod
    async def update_identity(self, account_id: int, changes: Mapping[str, Any]) -> None:
        """Update name/login columns of an account.

        Raises UnknownReferenceError when the account does not exist and
        DuplicateEntityError when the username is already taken.
        """
        ...
