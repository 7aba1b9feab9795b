"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from onboarding.presentation.api.v1.endpoints.health import router as health_router
from onboarding.presentation.api.v1.endpoints.onboarding import router as onboarding_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(onboarding_router)
