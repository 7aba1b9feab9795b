"""Health check endpoint: no dependencies, always available."""

from fastapi import APIRouter

from onboarding.config import get_settings
from onboarding.infrastructure.database import engine

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Reports version and which storage backends this instance is configured for.

    Nothing is contacted; a healthy answer only means the process is serving.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "database": engine.dialect.name,
        "file_storage": settings.file_storage_backend,
    }
