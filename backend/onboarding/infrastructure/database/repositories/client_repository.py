"""Concrete repository implementation for Client backed by SQLAlchemy."""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from onboarding.application.interfaces import ClientRepository
from onboarding.domain.entities import AttachmentKind, ClientProfile
from onboarding.domain.exceptions import UnknownReferenceError
from onboarding.infrastructure.database.errors import storage_errors
from onboarding.infrastructure.database.models import (
    AccountModel,
    ClientModel,
    ClientProductModel,
    ClientServiceModel,
    ProductModel,
    ServiceModel,
    StatusModel,
)


class SQLAlchemyClientRepository(ClientRepository):
    """Implements the ClientRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(
        self,
        model: ClientModel,
        *,
        status_name: str | None,
        first_name: str | None,
        last_name: str | None,
        username: str | None,
        service_names: list[str],
        products: list[tuple[int, str]],
    ) -> ClientProfile:
        """Map ORM model plus joined columns → domain read model."""
        return ClientProfile(
            client_id=model.id,
            business_name=model.business_name,
            address_street=model.address_street,
            address_city=model.address_city,
            address_state=model.address_state,
            address_zip=model.address_zip,
            website=model.website,
            phone=model.phone,
            hours_of_operation=model.hours_of_operation,
            micromarket_location=model.micromarket_location,
            neighborhood_info=model.neighborhood_info,
            demographics=model.demographics,
            number_of_people=model.number_of_people,
            target_age_group=model.target_age_group,
            industry=model.industry,
            dimensions=model.dimensions,
            wugs_visit=model.wugs_visit,
            pictures=list(model.pictures or []),
            contract=list(model.contract or []),
            last_active=model.last_active,
            status_name=status_name,
            first_name=first_name,
            last_name=last_name,
            username=username,
            service_names=service_names,
            product_types=sorted({product_type for _, product_type in products}),
            product_ids=[product_id for product_id, _ in products],
        )

    async def get_profile(self, client_id: int) -> ClientProfile | None:
        with storage_errors("client profile read"):
            result = await self._session.execute(
                select(
                    ClientModel,
                    StatusModel.status_name,
                    AccountModel.first_name,
                    AccountModel.last_name,
                    AccountModel.username,
                )
                .join(AccountModel, ClientModel.manager_id == AccountModel.id)
                .outerjoin(StatusModel, ClientModel.status_id == StatusModel.id)
                .where(ClientModel.id == client_id)
            )
            row = result.one_or_none()
            if row is None:
                return None
            model, status_name, first_name, last_name, username = row

            services = await self._session.execute(
                select(ServiceModel.service_name)
                .join(ClientServiceModel, ClientServiceModel.service_id == ServiceModel.id)
                .where(ClientServiceModel.client_id == client_id)
                .distinct()
                .order_by(ServiceModel.service_name)
            )
            products = await self._session.execute(
                select(ProductModel.id, ProductModel.type)
                .join(ClientProductModel, ClientProductModel.product_id == ProductModel.id)
                .where(ClientProductModel.client_id == client_id)
                .order_by(ProductModel.id)
            )

        return self._to_entity(
            model,
            status_name=status_name,
            first_name=first_name,
            last_name=last_name,
            username=username,
            service_names=list(services.scalars().all()),
            products=[(pid, ptype) for pid, ptype in products.all()],
        )

    async def exists(self, client_id: int) -> bool:
        with storage_errors("client lookup"):
            result = await self._session.execute(
                select(ClientModel.id).where(ClientModel.id == client_id)
            )
        return result.scalar_one_or_none() is not None

    async def update_fields(self, client_id: int, changes: Mapping[str, Any]) -> None:
        stmt = (
            update(ClientModel)
            .where(ClientModel.id == client_id)
            .values(**dict(changes), last_active=func.now())
            .execution_options(synchronize_session=False)
        )
        with storage_errors("client update"):
            result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise UnknownReferenceError("Client", client_id)

    async def get_manager_id(self, client_id: int) -> int:
        with storage_errors("client manager lookup"):
            result = await self._session.execute(
                select(ClientModel.manager_id).where(ClientModel.id == client_id)
            )
        manager_id = result.scalar_one_or_none()
        if manager_id is None:
            raise UnknownReferenceError("Client", client_id)
        return manager_id

    async def append_attachments(
        self, client_id: int, kind: AttachmentKind, urls: Sequence[str]
    ) -> list[str]:
        column = getattr(ClientModel, kind.value)
        with storage_errors(f"client {kind.value} append"):
            # Row lock keeps concurrent appends from losing entries (no-op on SQLite)
            result = await self._session.execute(
                select(column).where(ClientModel.id == client_id).with_for_update()
            )
            row = result.first()
            if row is None:
                raise UnknownReferenceError("Client", client_id)

            stored = list(row[0] or [])
            stored.extend(urls)
            await self._session.execute(
                update(ClientModel)
                .where(ClientModel.id == client_id)
                .values({kind.value: stored, "last_active": func.now()})
                .execution_options(synchronize_session=False)
            )
        return stored
