from .account_repository import AccountRepository
from .client_repository import ClientRepository
from .file_storage import FileStorage
from .selection_repository import SelectionRepository
from .unit_of_work import StorageOperation, TransactionCoordinator, UnitOfWork

__all__ = [
    "AccountRepository",
    "ClientRepository",
    "FileStorage",
    "SelectionRepository",
    "StorageOperation",
    "TransactionCoordinator",
    "UnitOfWork",
]
