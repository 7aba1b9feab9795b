"""In-memory fakes of the storage ports shared by the unit tests."""

import copy
from collections.abc import Collection, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

import pytest

from onboarding.application.interfaces import (
    AccountRepository,
    ClientRepository,
    SelectionRepository,
    StorageOperation,
    TransactionCoordinator,
    UnitOfWork,
)
from onboarding.domain.entities import AttachmentKind, ClientProfile, RelationKind
from onboarding.domain.exceptions import (
    DuplicateEntityError,
    StorageError,
    UnknownReferenceError,
)


class InMemoryState:
    """Tables kept as dicts plus a counter of every repository call."""

    def __init__(self):
        self.clients: dict[int, dict[str, Any]] = {}
        self.accounts: dict[int, dict[str, Any]] = {}
        self.selections: dict[RelationKind, dict[int, set[int]]] = {
            RelationKind.SERVICES: {},
            RelationKind.PRODUCTS: {},
        }
        self.catalog: dict[RelationKind, set[int]] = {
            RelationKind.SERVICES: set(),
            RelationKind.PRODUCTS: set(),
        }
        self.storage_calls = 0
        self.fail_on: str | None = None

    def hit(self, method: str) -> None:
        self.storage_calls += 1
        if self.fail_on == method:
            raise StorageError(f"injected failure in {method}")

    def snapshot(self):
        return copy.deepcopy((self.clients, self.accounts, self.selections))

    def restore(self, snapshot) -> None:
        self.clients, self.accounts, self.selections = snapshot

    def add_client(self, client_id: int, manager_id: int, **fields: Any) -> None:
        self.clients[client_id] = {
            "manager_id": manager_id,
            "pictures": [],
            "contract": [],
            "last_active": None,
            **fields,
        }

    def add_account(self, account_id: int, username: str, **fields: Any) -> None:
        self.accounts[account_id] = {"username": username, **fields}


class InMemoryClientRepository(ClientRepository):
    def __init__(self, state: InMemoryState):
        self._state = state

    def _require(self, client_id: int) -> dict[str, Any]:
        if client_id not in self._state.clients:
            raise UnknownReferenceError("Client", client_id)
        return self._state.clients[client_id]

    async def get_profile(self, client_id: int) -> ClientProfile | None:
        self._state.hit("get_profile")
        row = self._state.clients.get(client_id)
        if row is None:
            return None
        manager = self._state.accounts.get(row["manager_id"], {})
        return ClientProfile(
            client_id=client_id,
            business_name=row.get("business_name"),
            phone=row.get("phone"),
            pictures=list(row["pictures"]),
            contract=list(row["contract"]),
            last_active=row["last_active"],
            first_name=manager.get("first_name"),
            last_name=manager.get("last_name"),
            username=manager.get("username"),
        )

    async def exists(self, client_id: int) -> bool:
        self._state.hit("exists")
        return client_id in self._state.clients

    async def update_fields(self, client_id: int, changes: Mapping[str, Any]) -> None:
        self._state.hit("update_fields")
        row = self._require(client_id)
        row.update(changes)
        row["last_active"] = datetime.now(timezone.utc)

    async def get_manager_id(self, client_id: int) -> int:
        self._state.hit("get_manager_id")
        return self._require(client_id)["manager_id"]

    async def append_attachments(
        self, client_id: int, kind: AttachmentKind, urls: Sequence[str]
    ) -> list[str]:
        self._state.hit("append_attachments")
        row = self._require(client_id)
        row[kind.value] = row[kind.value] + list(urls)
        return list(row[kind.value])


class InMemoryAccountRepository(AccountRepository):
    def __init__(self, state: InMemoryState):
        self._state = state

    async def update_identity(self, account_id: int, changes: Mapping[str, Any]) -> None:
        self._state.hit("update_identity")
        if account_id not in self._state.accounts:
            raise UnknownReferenceError("Account", account_id)
        username = changes.get("username")
        for other_id, other in self._state.accounts.items():
            if other_id != account_id and other["username"] == username:
                raise DuplicateEntityError("Account", "username", str(username))
        self._state.accounts[account_id].update(changes)


class InMemorySelectionRepository(SelectionRepository):
    def __init__(self, state: InMemoryState):
        self._state = state

    async def get_selected_ids(self, kind: RelationKind, client_id: int) -> set[int]:
        self._state.hit("get_selected_ids")
        return set(self._state.selections[kind].get(client_id, set()))

    async def delete_selected(
        self, kind: RelationKind, client_id: int, ids: Collection[int]
    ) -> None:
        self._state.hit("delete_selected")
        self._state.selections[kind].get(client_id, set()).difference_update(ids)

    async def insert_selected(
        self, kind: RelationKind, client_id: int, ids: Collection[int]
    ) -> None:
        self._state.hit("insert_selected")
        unknown = set(ids) - self._state.catalog[kind]
        if unknown:
            raise UnknownReferenceError(kind.value, sorted(unknown))
        self._state.selections[kind].setdefault(client_id, set()).update(ids)


class InMemoryUnitOfWork(UnitOfWork):
    def __init__(self, state: InMemoryState):
        self.clients = InMemoryClientRepository(state)
        self.accounts = InMemoryAccountRepository(state)
        self.selections = InMemorySelectionRepository(state)


class FakeCoordinator(TransactionCoordinator):
    """Runs operations against InMemoryState, restoring a snapshot on failure."""

    def __init__(self, state: InMemoryState):
        self._state = state
        self.units = 0
        self.timeouts: list[float | None] = []

    async def run_atomic(
        self,
        steps: Sequence[StorageOperation],
        *,
        timeout: float | None = None,
    ) -> None:
        self.units += 1
        self.timeouts.append(timeout)
        snapshot = self._state.snapshot()
        uow = InMemoryUnitOfWork(self._state)
        try:
            for step in steps:
                await step(uow)
        except Exception:
            self._state.restore(snapshot)
            raise


@pytest.fixture
def state() -> InMemoryState:
    state = InMemoryState()
    state.add_account(1, "manager.one", first_name="Ada", last_name="Lane")
    state.add_account(2, "manager.two", first_name="Bo", last_name="Reed")
    state.add_client(42, manager_id=1, business_name="Corner Market", phone="555-0100")
    state.catalog[RelationKind.SERVICES].update({1, 2, 3, 7, 9})
    state.catalog[RelationKind.PRODUCTS].update({10, 11, 12, 13})
    return state


@pytest.fixture
def coordinator(state: InMemoryState) -> FakeCoordinator:
    return FakeCoordinator(state)
