"""Application service (use case) for client photo/contract attachments."""

from collections.abc import Sequence

from onboarding.application.interfaces import (
    FileStorage,
    TransactionCoordinator,
    UnitOfWork,
)
from onboarding.application.schemas.wizard_steps import parse_identifier
from onboarding.domain.entities import AttachmentKind, AttachmentUpload
from onboarding.domain.exceptions import (
    StepValidationError,
    UnknownReferenceError,
    UpstreamServiceError,
)
from onboarding.infrastructure.logging.step_logger import StepLogger, StepStage

slog = StepLogger("onboarding.attachments")


def _parse_kind(kind: AttachmentKind | str) -> AttachmentKind:
    try:
        return AttachmentKind(kind)
    except ValueError:
        raise StepValidationError("attachments", f"unknown attachment kind {kind!r}") from None


class AttachmentLinker:
    """Uploads a batch to file storage and appends the URLs to the client.

    The client must exist before anything is sent to storage. The append
    only happens after storage has returned one URL per file; a failed or
    short batch appends nothing, and files whose URLs could not be appended
    are discarded. Retrying a batch appends it again.
    """

    def __init__(
        self,
        coordinator: TransactionCoordinator,
        file_storage: FileStorage,
        *,
        timeout: float | None = None,
    ):
        self._coordinator = coordinator
        self._storage = file_storage
        self._timeout = timeout

    async def upload_attachments(
        self,
        client_id: int | str,
        kind: AttachmentKind | str,
        files: Sequence[AttachmentUpload],
    ) -> list[str]:
        client_pk = parse_identifier(client_id, step="attachments")
        attachment_kind = _parse_kind(kind)
        if not files:
            raise StepValidationError("attachments", "no files provided")

        async def _require_client(uow: UnitOfWork) -> None:
            if not await uow.clients.exists(client_pk):
                raise UnknownReferenceError("Client", client_pk)

        # Nothing is sent to storage for a client that does not exist
        await self._coordinator.run_atomic([_require_client], timeout=self._timeout)

        with slog.timed_step(
            StepStage.ATTACHMENT,
            f"upload {attachment_kind.value}",
            client_id=client_pk,
            files=len(files),
            provider=self._storage.provider_name,
        ):
            urls = await self._storage.store_batch(files)
            if len(urls) != len(files):
                await self._storage.discard(urls)
                raise UpstreamServiceError(
                    self._storage.provider_name,
                    f"stored {len(urls)} of {len(files)} files",
                )

        try:
            await self.append_attachments(client_pk, attachment_kind, urls)
        except Exception:
            slog.detail("append failed, discarding stored files", client_id=client_pk, urls=len(urls))
            await self._storage.discard(urls)
            raise
        return urls

    async def append_attachments(
        self,
        client_id: int | str,
        kind: AttachmentKind | str,
        urls: Sequence[str],
    ) -> None:
        """Append already-durable URLs after the existing entries."""
        client_pk = parse_identifier(client_id, step="attachments")
        attachment_kind = _parse_kind(kind)
        batch = list(urls)
        if not batch:
            return

        async def _append(uow: UnitOfWork) -> None:
            await uow.clients.append_attachments(client_pk, attachment_kind, batch)

        with slog.timed_step(
            StepStage.ATTACHMENT,
            f"append {attachment_kind.value}",
            client_id=client_pk,
            urls=len(batch),
        ):
            await self._coordinator.run_atomic([_append], timeout=self._timeout)
