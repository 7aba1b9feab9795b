"""SQLAlchemy ORM models for clients, accounts, catalogs and selections."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from onboarding.infrastructure.database.base import Base


class AccountModel(Base):
    """ORM model: staff user managing clients, maps to 'accounts'."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<AccountModel(id={self.id}, username='{self.username}')>"


class StatusModel(Base):
    """ORM model: read-only workflow stage labels."""

    __tablename__ = "statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    status_name: Mapped[str] = mapped_column(String(120), nullable=False)


class ServiceModel(Base):
    """ORM model: service catalog."""

    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_name: Mapped[str] = mapped_column(String(255), nullable=False)


class ProductModel(Base):
    """ORM model: product catalog."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(255), nullable=False)


class ClientModel(Base):
    """ORM model: business profile collected by the wizard, maps to 'clients'."""

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    address_state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address_zip: Mapped[str | None] = mapped_column(String(10), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    hours_of_operation: Mapped[str | None] = mapped_column(String(255), nullable=True)
    micromarket_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    neighborhood_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    demographics: Mapped[str | None] = mapped_column(Text, nullable=True)
    number_of_people: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_age_group: Mapped[str | None] = mapped_column(String(120), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(120), nullable=True)
    dimensions: Mapped[str | None] = mapped_column(String(255), nullable=True)
    wugs_visit: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    # Ordered URL lists; only ever appended to
    pictures: Mapped[list[str]] = mapped_column(nullable=False, default=list)
    contract: Mapped[list[str]] = mapped_column(nullable=False, default=list)
    status_id: Mapped[int | None] = mapped_column(
        ForeignKey("statuses.id"), nullable=True
    )
    manager_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False
    )
    last_active: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        Index("ix_clients_manager", "manager_id"),
    )

    def __repr__(self) -> str:
        return f"<ClientModel(id={self.id}, business_name='{self.business_name}')>"


class ClientServiceModel(Base):
    """Join row: one per (client, service) pair."""

    __tablename__ = "client_services"

    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), primary_key=True
    )
    service_id: Mapped[int] = mapped_column(
        ForeignKey("services.id"), primary_key=True
    )


class ClientProductModel(Base):
    """Join row: one per (client, product) pair."""

    __tablename__ = "client_products"

    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"), primary_key=True
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"), primary_key=True
    )
