"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import make_url

from onboarding.config import get_settings
from onboarding.infrastructure.database import Base, engine
from onboarding.infrastructure.logging.log_config import setup_logging
from onboarding.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _ensure_database_exists(database_url: str) -> None:
    """Create the PostgreSQL database named in ``database_url`` if missing.

    SQLite creates its file on first connect, so only PostgreSQL URLs are
    handled. Failures are logged and startup continues; ``create_all``
    reports the real connection error.
    """
    import asyncpg

    url = make_url(database_url)
    if url.get_backend_name() != "postgresql" or not url.database:
        return

    # asyncpg wants a plain DSN without the "+driver" suffix
    maintenance_dsn = url.set(drivername="postgresql", database="postgres").render_as_string(
        hide_password=False
    )
    try:
        conn = await asyncpg.connect(maintenance_dsn)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not reach PostgreSQL to check database '%s': %s", url.database, exc)
        return

    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", url.database)
        if exists:
            logger.debug("Database '%s' already exists", url.database)
            return
        # CREATE DATABASE cannot run inside a transaction block
        await conn.execute(f'CREATE DATABASE "{url.database}"')
        logger.info("Created database '%s'", url.database)
    except asyncpg.PostgresError as exc:
        logger.warning("Could not create database '%s': %s", url.database, exc)
    finally:
        await conn.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: ensure database, create tables, prepare uploads."""
    settings = get_settings()
    setup_logging()

    await _ensure_database_exists(settings.database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Onboarding tables ready on %s", engine.dialect.name)

    # Local attachment storage and the /files mount share this directory
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info(
        "Attachment storage: %s (uploads in %s)",
        settings.file_storage_backend,
        settings.upload_dir,
    )

    yield

    await engine.dispose()


async def _invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed bodies and path parameters without echoing them back."""
    logger.info(
        "Rejected %s %s: %d validation error(s)", request.method, request.url.path, len(exc.errors())
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Invalid request"},
    )


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _invalid_request_handler)
    app.include_router(api_router)

    # Durable URLs of locally stored attachments resolve here
    app.mount(
        "/files",
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="files",
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "onboarding.main:app",
        host="0.0.0.0",
        port=5000,
        reload=True,
    )
