from .base import Base
from .session import engine, async_session_factory, build_engine, get_db_session
from .models import (
    AccountModel,
    ClientModel,
    ClientProductModel,
    ClientServiceModel,
    ProductModel,
    ServiceModel,
    StatusModel,
)

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "build_engine",
    "get_db_session",
    "AccountModel",
    "ClientModel",
    "ClientProductModel",
    "ClientServiceModel",
    "ProductModel",
    "ServiceModel",
    "StatusModel",
]
