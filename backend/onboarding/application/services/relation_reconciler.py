"""Application service (use case) for client ↔ catalog selection reconciliation."""

from collections.abc import Iterable

from onboarding.application.interfaces import (
    StorageOperation,
    TransactionCoordinator,
    UnitOfWork,
)
from onboarding.application.schemas.wizard_steps import parse_identifier
from onboarding.domain.entities import RelationKind, diff_selection
from onboarding.domain.exceptions import StepValidationError, UnknownReferenceError
from onboarding.infrastructure.logging.step_logger import StepLogger, StepStage

slog = StepLogger("onboarding.reconciler")


class RelationReconciler:
    """Makes a client's join rows equal a desired set with minimal changes.

    The delete and insert phases always run inside one atomic unit, so a
    failed insert leaves the previous selection in place.
    """

    def __init__(
        self,
        coordinator: TransactionCoordinator,
        *,
        timeout: float | None = None,
    ):
        self._coordinator = coordinator
        self._timeout = timeout

    async def reconcile(
        self,
        client_id: int | str,
        desired_ids: Iterable[int | str],
        kind: RelationKind = RelationKind.SERVICES,
    ) -> None:
        """Replace the stored selection of ``kind`` with ``desired_ids``."""
        client_pk = parse_identifier(client_id)
        desired = self._normalize(desired_ids, kind)

        async def _require_client(uow: UnitOfWork) -> None:
            if not await uow.clients.exists(client_pk):
                raise UnknownReferenceError("Client", client_pk)

        with slog.timed_step(StepStage.RECONCILE, kind.value, client_id=client_pk, desired=len(desired)):
            await self._coordinator.run_atomic(
                [_require_client, self.operation(kind, client_pk, desired)],
                timeout=self._timeout,
            )

    def operation(
        self, kind: RelationKind, client_id: int, desired_ids: Iterable[int]
    ) -> StorageOperation:
        """Return the reconcile work as a step for a larger atomic unit."""
        desired = frozenset(desired_ids)

        async def _reconcile(uow: UnitOfWork) -> None:
            current = await uow.selections.get_selected_ids(kind, client_id)
            diff = diff_selection(desired, current)
            slog.detail(
                f"{kind.value} diff",
                client_id=client_id,
                delete=sorted(diff.to_delete),
                insert=sorted(diff.to_insert),
            )
            if diff.to_delete:
                await uow.selections.delete_selected(kind, client_id, diff.to_delete)
            if diff.to_insert:
                await uow.selections.insert_selected(kind, client_id, diff.to_insert)

        return _reconcile

    @staticmethod
    def _normalize(ids: Iterable[int | str], kind: RelationKind) -> frozenset[int]:
        if isinstance(ids, (str, bytes)):
            raise StepValidationError(kind.value, "selection must be a list of ids")
        return frozenset(parse_identifier(i, f"{kind.value} id", step=kind.value) for i in ids)
