"""Application service (use case) applying one wizard step to storage."""

from collections.abc import Mapping
from typing import Any

from onboarding.application.interfaces import (
    StorageOperation,
    TransactionCoordinator,
    UnitOfWork,
)
from onboarding.application.schemas.wizard_steps import (
    AdditionalInfoStep,
    ContactStep,
    DemographicsStep,
    LocationStep,
    ProductChoiceStep,
    ServiceChoiceStep,
    WizardStep,
    parse_identifier,
    parse_step,
)
from onboarding.application.services.relation_reconciler import RelationReconciler
from onboarding.domain.entities import RelationKind
from onboarding.infrastructure.logging.step_logger import StepLogger, StepStage

slog = StepLogger("onboarding.steps")


def _update_client(client_id: int, changes: Mapping[str, Any]) -> StorageOperation:
    async def _op(uow: UnitOfWork) -> None:
        await uow.clients.update_fields(client_id, changes)

    return _op


def _update_manager(client_id: int, changes: Mapping[str, Any]) -> StorageOperation:
    async def _op(uow: UnitOfWork) -> None:
        manager_id = await uow.clients.get_manager_id(client_id)
        await uow.accounts.update_identity(manager_id, changes)

    return _op


class StepUpdater:
    """Validates a step payload and applies it as one atomic unit.

    Every step stamps the client's ``last_active`` through
    ``ClientRepository.update_fields``; set-valued steps add a reconcile
    operation and the contact step adds the manager account update.
    """

    def __init__(
        self,
        coordinator: TransactionCoordinator,
        reconciler: RelationReconciler,
        *,
        timeout: float | None = None,
    ):
        self._coordinator = coordinator
        self._reconciler = reconciler
        self._timeout = timeout

    async def apply_step(
        self,
        step_name: str,
        client_id: int | str,
        fields: Mapping[str, Any] | None,
    ) -> WizardStep:
        """Validate, then write. Returns the parsed payload."""
        client_pk = parse_identifier(client_id, step=step_name)
        payload = parse_step(step_name, fields)
        operations = self.plan(client_pk, payload)

        with slog.timed_step(StepStage.STEP, step_name, client_id=client_pk, ops=len(operations)):
            await self._coordinator.run_atomic(operations, timeout=self._timeout)
        return payload

    def plan(self, client_id: int, payload: WizardStep) -> list[StorageOperation]:
        """Translate a parsed payload into ordered storage operations."""
        if isinstance(payload, (LocationStep, DemographicsStep, AdditionalInfoStep)):
            return [_update_client(client_id, payload.changes())]

        if isinstance(payload, ServiceChoiceStep):
            return [
                _update_client(client_id, {}),
                self._reconciler.operation(
                    RelationKind.SERVICES, client_id, payload.selected_ids()
                ),
            ]

        if isinstance(payload, ProductChoiceStep):
            return [
                _update_client(client_id, {}),
                self._reconciler.operation(
                    RelationKind.PRODUCTS, client_id, payload.selected_ids()
                ),
            ]

        if isinstance(payload, ContactStep):
            return [
                _update_client(client_id, payload.client_changes()),
                _update_manager(client_id, payload.account_changes()),
            ]

        raise TypeError(f"Unhandled wizard step payload: {type(payload).__name__}")
