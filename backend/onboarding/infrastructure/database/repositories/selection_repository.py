"""Concrete repository for the client_services / client_products join tables."""

from collections.abc import Collection

from sqlalchemy import delete, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from onboarding.application.interfaces import SelectionRepository
from onboarding.domain.entities import RelationKind
from onboarding.domain.exceptions import UnknownReferenceError
from onboarding.infrastructure.database.errors import storage_errors
from onboarding.infrastructure.database.models import (
    ClientProductModel,
    ClientServiceModel,
)

# kind → (join model, catalog column name, catalog label)
_RELATIONS = {
    RelationKind.SERVICES: (ClientServiceModel, "service_id", "Service"),
    RelationKind.PRODUCTS: (ClientProductModel, "product_id", "Product"),
}


class SQLAlchemySelectionRepository(SelectionRepository):
    """Implements the SelectionRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _insert_ignoring_duplicates(self, model, target: str, rows: list[dict]):
        """INSERT ... ON CONFLICT DO NOTHING where the dialect supports it."""
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            return (
                postgresql.insert(model)
                .values(rows)
                .on_conflict_do_nothing(index_elements=["client_id", target])
            )
        if dialect == "sqlite":
            return (
                sqlite.insert(model)
                .values(rows)
                .on_conflict_do_nothing(index_elements=["client_id", target])
            )
        return insert(model).values(rows)

    async def get_selected_ids(self, kind: RelationKind, client_id: int) -> set[int]:
        model, target, _ = _RELATIONS[kind]
        column = getattr(model, target)
        with storage_errors(f"{kind.value} selection read"):
            result = await self._session.execute(
                select(column).where(model.client_id == client_id)
            )
        return set(result.scalars().all())

    async def delete_selected(
        self, kind: RelationKind, client_id: int, ids: Collection[int]
    ) -> None:
        if not ids:
            return
        model, target, _ = _RELATIONS[kind]
        column = getattr(model, target)
        with storage_errors(f"{kind.value} selection delete"):
            await self._session.execute(
                delete(model).where(model.client_id == client_id, column.in_(list(ids)))
            )

    async def insert_selected(
        self, kind: RelationKind, client_id: int, ids: Collection[int]
    ) -> None:
        if not ids:
            return
        model, target, label = _RELATIONS[kind]
        rows = [{"client_id": client_id, target: catalog_id} for catalog_id in sorted(ids)]
        with storage_errors(f"{kind.value} selection insert"):
            try:
                await self._session.execute(
                    self._insert_ignoring_duplicates(model, target, rows)
                )
            except IntegrityError as exc:
                raise UnknownReferenceError(label, sorted(ids)) from exc
