"""FastAPI dependency injection: wires infrastructure to application layer."""

import logging
from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from onboarding.config import get_settings
from onboarding.application.interfaces import FileStorage, TransactionCoordinator
from onboarding.application.services import (
    AttachmentLinker,
    ClientProfileService,
    RelationReconciler,
    StepUpdater,
)
from onboarding.infrastructure.database.repositories import SQLAlchemyClientRepository
from onboarding.infrastructure.database.session import async_session_factory, get_db_session
from onboarding.infrastructure.database.unit_of_work import SQLAlchemyTransactionCoordinator
from onboarding.infrastructure.storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)


def get_transaction_coordinator() -> TransactionCoordinator:
    """Coordinator that opens its own session per atomic unit."""
    return SQLAlchemyTransactionCoordinator(async_session_factory)


@lru_cache
def get_file_storage() -> FileStorage:
    """File-storage adapter selected by FILE_STORAGE_BACKEND."""
    settings = get_settings()
    if settings.file_storage_backend == "google_drive":
        from onboarding.infrastructure.storage.google_drive_storage import GoogleDriveFileStorage

        info = settings.google_service_account_info()
        if info:
            return GoogleDriveFileStorage.from_service_account_info(
                info, folder_id=settings.google_drive_folder_id
            )
        logger.warning(
            "GOOGLE_SERVICE_ACCOUNT_JSON is not configured; falling back to local file storage."
        )
    return LocalFileStorage(
        upload_dir=settings.upload_dir,
        public_base_url=settings.public_base_url,
    )


async def get_client_profile_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ClientProfileService, None]:
    """Provides a ClientProfileService with its repository wired up."""
    repository = SQLAlchemyClientRepository(session)
    yield ClientProfileService(repository)


async def get_relation_reconciler(
    coordinator: TransactionCoordinator = Depends(get_transaction_coordinator),
) -> AsyncGenerator[RelationReconciler, None]:
    settings = get_settings()
    yield RelationReconciler(coordinator, timeout=settings.transaction_timeout)


async def get_step_updater(
    coordinator: TransactionCoordinator = Depends(get_transaction_coordinator),
    reconciler: RelationReconciler = Depends(get_relation_reconciler),
) -> AsyncGenerator[StepUpdater, None]:
    """Provides a StepUpdater sharing the coordinator with its reconciler."""
    settings = get_settings()
    yield StepUpdater(coordinator, reconciler, timeout=settings.transaction_timeout)


async def get_attachment_linker(
    coordinator: TransactionCoordinator = Depends(get_transaction_coordinator),
    file_storage: FileStorage = Depends(get_file_storage),
) -> AsyncGenerator[AttachmentLinker, None]:
    settings = get_settings()
    yield AttachmentLinker(coordinator, file_storage, timeout=settings.transaction_timeout)
