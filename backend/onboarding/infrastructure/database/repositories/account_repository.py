"""Concrete repository implementation for Account backed by SQLAlchemy."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from onboarding.application.interfaces import AccountRepository
from onboarding.domain.exceptions import DuplicateEntityError, UnknownReferenceError
from onboarding.infrastructure.database.errors import storage_errors
from onboarding.infrastructure.database.models import AccountModel


class SQLAlchemyAccountRepository(AccountRepository):
    """Implements the AccountRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def update_identity(self, account_id: int, changes: Mapping[str, Any]) -> None:
        if not changes:
            return
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(**dict(changes))
            .execution_options(synchronize_session=False)
        )
        with storage_errors("account update"):
            try:
                result = await self._session.execute(stmt)
            except IntegrityError as exc:
                raise DuplicateEntityError(
                    "Account", "username", str(changes.get("username"))
                ) from exc
        if result.rowcount == 0:
            raise UnknownReferenceError("Account", account_id)
