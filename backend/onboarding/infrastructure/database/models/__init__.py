from .onboarding_models import (
    AccountModel,
    ClientModel,
    ClientProductModel,
    ClientServiceModel,
    ProductModel,
    ServiceModel,
    StatusModel,
)

__all__ = [
    "AccountModel",
    "ClientModel",
    "ClientProductModel",
    "ClientServiceModel",
    "ProductModel",
    "ServiceModel",
    "StatusModel",
]
