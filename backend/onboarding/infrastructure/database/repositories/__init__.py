from .account_repository import SQLAlchemyAccountRepository
from .client_repository import SQLAlchemyClientRepository
from .selection_repository import SQLAlchemySelectionRepository

__all__ = [
    "SQLAlchemyAccountRepository",
    "SQLAlchemyClientRepository",
    "SQLAlchemySelectionRepository",
]
