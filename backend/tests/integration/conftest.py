"""SQLite-backed fixtures for persistence and API tests."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from onboarding.infrastructure.database import Base, build_engine
from onboarding.infrastructure.database.models import (
    AccountModel,
    ClientModel,
    ProductModel,
    ServiceModel,
    StatusModel,
)
from onboarding.infrastructure.database.unit_of_work import SQLAlchemyTransactionCoordinator

SERVICE_NAMES = {1: "Delivery", 2: "Catering", 3: "Vending", 7: "Micro Market", 9: "Coffee"}
PRODUCT_TYPES = {10: "Snacks", 11: "Beverages", 12: "Fresh Food", 13: "Frozen"}


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'onboarding.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Two managers, client 42 and the service/product catalogs."""
    async with session_factory() as session:
        session.add_all(
            [
                AccountModel(id=1, username="manager.one", first_name="Ada", last_name="Lane"),
                AccountModel(id=2, username="manager.two", first_name="Bo", last_name="Reed"),
                StatusModel(id=1, status_name="Onboarding"),
            ]
        )
        session.add_all(ServiceModel(id=k, service_name=v) for k, v in SERVICE_NAMES.items())
        session.add_all(ProductModel(id=k, type=v) for k, v in PRODUCT_TYPES.items())
        await session.flush()
        session.add(
            ClientModel(
                id=42,
                business_name="Corner Market",
                phone="555-0100",
                manager_id=1,
                status_id=1,
            )
        )
        await session.commit()


@pytest.fixture
def coordinator(session_factory) -> SQLAlchemyTransactionCoordinator:
    return SQLAlchemyTransactionCoordinator(session_factory)
