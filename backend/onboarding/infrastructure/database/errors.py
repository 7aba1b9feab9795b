"""Translation of SQLAlchemy failures into domain exceptions."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from onboarding.domain.exceptions import OnboardingError, StorageError


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise driver/ORM errors as StorageError; domain errors pass through."""
    try:
        yield
    except OnboardingError:
        raise
    except SQLAlchemyError as exc:
        raise StorageError(f"{action} failed: {type(exc).__name__}") from exc
