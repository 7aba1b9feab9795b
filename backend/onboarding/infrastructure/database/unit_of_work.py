"""SQLAlchemy unit of work and transaction coordinator."""

import asyncio
import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from onboarding.application.interfaces import (
    StorageOperation,
    TransactionCoordinator,
    UnitOfWork,
)
from onboarding.domain.exceptions import StorageError, TransactionError
from onboarding.infrastructure.database.repositories import (
    SQLAlchemyAccountRepository,
    SQLAlchemyClientRepository,
    SQLAlchemySelectionRepository,
)
from onboarding.infrastructure.logging.step_logger import StepLogger, StepStage

logger = logging.getLogger(__name__)
slog = StepLogger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Repositories sharing one AsyncSession (and so one transaction)."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.clients = SQLAlchemyClientRepository(session)
        self.accounts = SQLAlchemyAccountRepository(session)
        self.selections = SQLAlchemySelectionRepository(session)


class SQLAlchemyTransactionCoordinator(TransactionCoordinator):
    """Runs storage operations in one session-scoped transaction.

    Each call checks out its own session from the factory and closes it on
    every exit path, so a failed unit never leaks a connection.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def run_atomic(
        self,
        steps: Sequence[StorageOperation],
        *,
        timeout: float | None = None,
    ) -> None:
        async with self._session_factory() as session:
            try:
                await asyncio.wait_for(self._execute(session, steps), timeout)
            except asyncio.TimeoutError as exc:
                slog.step_error(StepStage.TRANSACTION, f"timed out after {timeout}s", error=exc)
                raise TransactionError(
                    f"atomic unit of {len(steps)} operation(s) timed out after {timeout}s"
                ) from exc
            except Exception as exc:
                slog.step_error(StepStage.TRANSACTION, "rolled back", error=exc)
                raise

    async def _execute(self, session: AsyncSession, steps: Sequence[StorageOperation]) -> None:
        uow = SQLAlchemyUnitOfWork(session)
        transaction = await session.begin()
        try:
            for index, step in enumerate(steps):
                logger.debug("Running operation %d/%d", index + 1, len(steps))
                await step(uow)
        except BaseException:
            # BaseException so a timeout cancellation also rolls back
            await transaction.rollback()
            raise

        try:
            await transaction.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"commit failed: {type(exc).__name__}") from exc
