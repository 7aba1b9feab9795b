"""Onboarding wizard endpoints: one update per step, keyed by client id.

Failures never expose internal detail: invalid input answers 422, an
unknown client on read answers 404, everything else answers 500.
"""

import logging
from io import BytesIO
from typing import Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile, status

from onboarding.application.schemas import (
    AttachmentUploadResponse,
    ClientProfileResponse,
    StepAcceptedResponse,
)
from onboarding.application.services import (
    AttachmentLinker,
    ClientProfileService,
    StepUpdater,
)
from onboarding.config import get_settings
from onboarding.domain.entities import AttachmentKind, AttachmentUpload
from onboarding.domain.exceptions import (
    EntityNotFoundError,
    OnboardingError,
    StepValidationError,
)
from onboarding.infrastructure.dependencies import (
    get_attachment_linker,
    get_client_profile_service,
    get_step_updater,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])


# ── Helpers ──────────────────────────────────────────────────────────

def _to_http_error(exc: OnboardingError, action: str, client_id: str) -> HTTPException:
    if isinstance(exc, StepValidationError):
        logger.info("Rejected %s for client %s: %s", action, client_id, exc)
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid request"
        )
    logger.error("Failed %s for client %s: %s", action, client_id, exc, exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error"
    )


async def _apply(
    updater: StepUpdater, step_name: str, client_id: str, payload: dict[str, Any]
) -> StepAcceptedResponse:
    try:
        await updater.apply_step(step_name, client_id, payload)
    except OnboardingError as exc:
        raise _to_http_error(exc, step_name, client_id)
    return StepAcceptedResponse()


_READ_CHUNK = 1024 * 1024


async def _read_limited(upload_file: UploadFile, max_bytes: int) -> bytes:
    """Read an upload in chunks, stopping as soon as it exceeds ``max_bytes``."""
    too_large = HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail="File too large",
    )
    if upload_file.size is not None and upload_file.size > max_bytes:
        raise too_large

    content = bytearray()
    while True:
        chunk = await upload_file.read(_READ_CHUNK)
        if not chunk:
            break
        content.extend(chunk)
        if len(content) > max_bytes:
            raise too_large
    return bytes(content)


# ── Endpoints ────────────────────────────────────────────────────────

@router.get("/client/{client_id}", response_model=ClientProfileResponse)
async def get_client(
    client_id: str,
    service: ClientProfileService = Depends(get_client_profile_service),
) -> ClientProfileResponse:
    """Retrieve a client's assembled onboarding profile."""
    try:
        profile = await service.get_client(client_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    except OnboardingError as exc:
        raise _to_http_error(exc, "profile read", client_id)
    return ClientProfileResponse.model_validate(profile, from_attributes=True)


@router.put("/clientlocationinfo/{client_id}", response_model=StepAcceptedResponse)
async def update_location(
    client_id: str,
    payload: dict[str, Any] = Body(...),
    updater: StepUpdater = Depends(get_step_updater),
) -> StepAcceptedResponse:
    """Business name, address and contact details."""
    return await _apply(updater, "location", client_id, payload)


@router.put("/demographics/{client_id}", response_model=StepAcceptedResponse)
async def update_demographics(
    client_id: str,
    payload: dict[str, Any] = Body(...),
    updater: StepUpdater = Depends(get_step_updater),
) -> StepAcceptedResponse:
    return await _apply(updater, "demographics", client_id, payload)


@router.put("/additionalinfo/{client_id}", response_model=StepAcceptedResponse)
async def update_additional_info(
    client_id: str,
    payload: dict[str, Any] = Body(...),
    updater: StepUpdater = Depends(get_step_updater),
) -> StepAcceptedResponse:
    return await _apply(updater, "additionalInfo", client_id, payload)


@router.put("/servicechoice/{client_id}", response_model=StepAcceptedResponse)
async def update_service_choice(
    client_id: str,
    payload: dict[str, Any] = Body(...),
    updater: StepUpdater = Depends(get_step_updater),
) -> StepAcceptedResponse:
    """Replace the client's selected services with the submitted set."""
    return await _apply(updater, "serviceChoice", client_id, payload)


@router.put("/foodpreferences/{client_id}", response_model=StepAcceptedResponse)
async def update_product_choice(
    client_id: str,
    payload: dict[str, Any] = Body(...),
    updater: StepUpdater = Depends(get_step_updater),
) -> StepAcceptedResponse:
    """Reconcile the client's product preferences with the submitted set."""
    return await _apply(updater, "productChoice", client_id, payload)


@router.put("/changecontact/{client_id}", response_model=StepAcceptedResponse)
async def change_contact(
    client_id: str,
    payload: dict[str, Any] = Body(...),
    updater: StepUpdater = Depends(get_step_updater),
) -> StepAcceptedResponse:
    """Update the client phone and its manager's identity together."""
    return await _apply(updater, "contact", client_id, payload)


@router.post("/upload/{kind}/{client_id}", response_model=AttachmentUploadResponse)
async def upload_attachments(
    kind: AttachmentKind,
    client_id: str,
    files: list[UploadFile] = File(...),
    linker: AttachmentLinker = Depends(get_attachment_linker),
) -> AttachmentUploadResponse:
    """Store a batch of pictures or contract files and append their URLs."""
    max_bytes = get_settings().max_upload_size_mb * 1024 * 1024

    uploads: list[AttachmentUpload] = []
    for upload_file in files:
        content = await _read_limited(upload_file, max_bytes)
        uploads.append(
            AttachmentUpload(
                filename=upload_file.filename or "untitled",
                mime_type=upload_file.content_type or "application/octet-stream",
                stream=BytesIO(content),
            )
        )

    try:
        urls = await linker.upload_attachments(client_id, kind, uploads)
    except OnboardingError as exc:
        raise _to_http_error(exc, f"{kind.value} upload", client_id)
    return AttachmentUploadResponse(urls=urls)
