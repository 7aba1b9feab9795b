"""Domain-specific exceptions: framework-independent."""

from typing import Any


class OnboardingError(Exception):
    """Base class for every failure raised by the onboarding core."""


class EntityNotFoundError(OnboardingError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(OnboardingError):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class StepValidationError(OnboardingError):
    """Raised for malformed or missing input. Storage is never touched."""

    def __init__(self, step: str, message: str, errors: list[dict[str, Any]] | None = None):
        self.step = step
        self.errors = errors or []
        super().__init__(f"[{step}] {message}")


class UnknownReferenceError(OnboardingError):
    """Raised when storage reports a missing row or a foreign-key violation."""

    def __init__(self, entity_type: str, reference: Any):
        self.entity_type = entity_type
        self.reference = reference
        super().__init__(f"{entity_type} reference {reference!r} does not exist")


class StorageError(OnboardingError):
    """Raised when a connection or query fails."""


class TransactionError(OnboardingError):
    """Raised when an atomic unit cannot complete (e.g. it timed out)."""


class UpstreamServiceError(OnboardingError):
    """Raised when the file-storage provider fails or a batch is incomplete.

    Provider-agnostic: works for local disk, Google Drive, etc.
    """

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"[{provider}] {message}")
