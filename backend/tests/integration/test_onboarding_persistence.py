"""Integration tests for the SQLAlchemy repositories and transaction coordinator."""

import asyncio

import pytest

from onboarding.application.services import (
    AttachmentLinker,
    ClientProfileService,
    RelationReconciler,
    StepUpdater,
)
from onboarding.domain.entities import RelationKind
from onboarding.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    TransactionError,
    UnknownReferenceError,
)
from onboarding.infrastructure.database.repositories import (
    SQLAlchemyClientRepository,
    SQLAlchemySelectionRepository,
)

pytestmark = pytest.mark.usefixtures("seeded")


@pytest.fixture
def reconciler(coordinator) -> RelationReconciler:
    return RelationReconciler(coordinator)


@pytest.fixture
def updater(coordinator, reconciler) -> StepUpdater:
    return StepUpdater(coordinator, reconciler)


async def _selected(session_factory, kind: RelationKind, client_id: int = 42) -> set[int]:
    async with session_factory() as session:
        return await SQLAlchemySelectionRepository(session).get_selected_ids(kind, client_id)


async def _profile(session_factory, client_id: int = 42):
    async with session_factory() as session:
        return await ClientProfileService(SQLAlchemyClientRepository(session)).get_client(client_id)


class TestRelationReconciliation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "before, desired",
        [
            (set(), {1, 2}),
            ({1, 2}, set()),
            ({1, 2}, {1, 2}),
            ({1, 3}, {2, 3, 7}),
        ],
    )
    async def test_stored_set_equals_desired(self, reconciler, session_factory, before, desired):
        await reconciler.reconcile(42, before)
        await reconciler.reconcile(42, desired)
        assert await _selected(session_factory, RelationKind.SERVICES) == desired

    @pytest.mark.asyncio
    async def test_reconcile_twice_is_idempotent(self, reconciler, session_factory):
        await reconciler.reconcile(42, [3, 7])
        await reconciler.reconcile(42, [3, 7])
        assert await _selected(session_factory, RelationKind.SERVICES) == {3, 7}

    @pytest.mark.asyncio
    async def test_unknown_catalog_id_rolls_back_the_delete(self, reconciler, session_factory):
        await reconciler.reconcile(42, {3, 7})
        with pytest.raises(UnknownReferenceError):
            await reconciler.reconcile(42, {7, 404})
        assert await _selected(session_factory, RelationKind.SERVICES) == {3, 7}

    @pytest.mark.asyncio
    async def test_products_use_their_own_table(self, reconciler, session_factory):
        await reconciler.reconcile(42, {10, 13}, RelationKind.PRODUCTS)
        assert await _selected(session_factory, RelationKind.PRODUCTS) == {10, 13}
        assert await _selected(session_factory, RelationKind.SERVICES) == set()

    @pytest.mark.asyncio
    async def test_unknown_client_is_rejected(self, reconciler):
        with pytest.raises(UnknownReferenceError):
            await reconciler.reconcile(404, {3})


class TestWizardSteps:
    @pytest.mark.asyncio
    async def test_client_42_service_choice_scenario(self, updater, session_factory):
        await updater.apply_step("serviceChoice", "42", {"service_ids": [3, 7]})
        await updater.apply_step("serviceChoice", "42", {"service_ids": [7, 9]})

        assert await _selected(session_factory, RelationKind.SERVICES) == {7, 9}
        profile = await _profile(session_factory)
        assert profile.service_names == ["Coffee", "Micro Market"]
        assert profile.last_active is not None

    @pytest.mark.asyncio
    async def test_location_step_persists_fields(self, updater, session_factory):
        await updater.apply_step(
            "location",
            42,
            {
                "business_name": "Corner Market & Deli",
                "address_street": "1 Main St",
                "address_city": "Minneapolis",
                "address_state": "MN",
                "address_zip": "55401",
            },
        )
        profile = await _profile(session_factory)
        assert profile.business_name == "Corner Market & Deli"
        assert profile.address_zip == "55401"
        assert profile.phone == "555-0100"

    @pytest.mark.asyncio
    async def test_unknown_client_update_is_rejected(self, updater):
        with pytest.raises(UnknownReferenceError):
            await updater.apply_step("demographics", 404, {"industry": "Retail"})

    @pytest.mark.asyncio
    async def test_contact_updates_client_and_manager(self, updater, session_factory):
        await updater.apply_step(
            "contact",
            42,
            {"phone": "555-0199", "first_name": "Ada", "last_name": "King", "username": "ada.king"},
        )
        profile = await _profile(session_factory)
        assert profile.phone == "555-0199"
        assert (profile.first_name, profile.last_name, profile.username) == ("Ada", "King", "ada.king")

    @pytest.mark.asyncio
    async def test_duplicate_username_rolls_back_phone(self, updater, session_factory):
        with pytest.raises(DuplicateEntityError):
            await updater.apply_step(
                "contact",
                42,
                {"phone": "555-0199", "first_name": "Ada", "last_name": "Lane", "username": "manager.two"},
            )
        profile = await _profile(session_factory)
        assert profile.phone == "555-0100"
        assert profile.username == "manager.one"
        assert profile.last_active is None


class TestProfileRead:
    @pytest.mark.asyncio
    async def test_profile_assembles_joined_data(self, reconciler, session_factory):
        await reconciler.reconcile(42, {3}, RelationKind.SERVICES)
        await reconciler.reconcile(42, {12, 10}, RelationKind.PRODUCTS)

        profile = await _profile(session_factory)
        assert profile.status_name == "Onboarding"
        assert profile.username == "manager.one"
        assert profile.service_names == ["Vending"]
        assert profile.product_ids == [10, 12]
        assert profile.product_types == ["Fresh Food", "Snacks"]
        assert profile.pictures == []

    @pytest.mark.asyncio
    async def test_missing_client_raises_not_found(self, session_factory):
        with pytest.raises(EntityNotFoundError):
            await _profile(session_factory, 404)


class TestAttachments:
    @pytest.mark.asyncio
    async def test_batches_append_in_order(self, coordinator, session_factory):
        linker = AttachmentLinker(coordinator, file_storage=None)
        await linker.append_attachments(42, "pictures", ["u1", "u2"])
        await linker.append_attachments(42, "pictures", ["u3"])

        profile = await _profile(session_factory)
        assert profile.pictures == ["u1", "u2", "u3"]
        assert profile.contract == []
        assert profile.last_active is not None

    @pytest.mark.asyncio
    async def test_append_to_unknown_client(self, coordinator):
        linker = AttachmentLinker(coordinator, file_storage=None)
        with pytest.raises(UnknownReferenceError):
            await linker.append_attachments(404, "contract", ["u1"])


class TestTransactionCoordinator:
    @pytest.mark.asyncio
    async def test_timeout_rolls_back_and_raises(self, coordinator, session_factory):
        async def slow_update(uow):
            await uow.clients.update_fields(42, {"industry": "Retail"})
            await asyncio.sleep(5)

        with pytest.raises(TransactionError):
            await coordinator.run_atomic([slow_update], timeout=0.05)

        profile = await _profile(session_factory)
        assert profile.industry is None
        assert profile.last_active is None

    @pytest.mark.asyncio
    async def test_failing_operation_undoes_earlier_ones(self, coordinator, session_factory):
        async def update(uow):
            await uow.clients.update_fields(42, {"industry": "Retail"})

        async def fail(uow):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await coordinator.run_atomic([update, fail])

        profile = await _profile(session_factory)
        assert profile.industry is None
