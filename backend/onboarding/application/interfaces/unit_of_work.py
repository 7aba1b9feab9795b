"""Ports for atomic multi-statement work.

A StorageOperation receives the repositories of one open transaction. The
TransactionCoordinator runs a sequence of them as a single atomic unit.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from .account_repository import AccountRepository
from .client_repository import ClientRepository
from .selection_repository import SelectionRepository


class UnitOfWork(ABC):
    """Repositories bound to one storage session and its transaction."""

    clients: ClientRepository
    accounts: AccountRepository
    selections: SelectionRepository


StorageOperation = Callable[[UnitOfWork], Awaitable[Any]]


class TransactionCoordinator(ABC):
    """Port for running storage operations all-or-nothing."""

    @abstractmethod
    async def run_atomic(
        self,
        steps: Sequence[StorageOperation],
        *,
        timeout: float | None = None,
    ) -> None:
        """Run ``steps`` in order inside one transaction.

        Commits when every step succeeds. Otherwise rolls back and re-raises
        the triggering error unchanged; a timeout raises TransactionError.
        """
        ...
