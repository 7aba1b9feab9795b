"""Domain entity: assembled read model of one onboarding client."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ClientProfile:
    """A client's business profile joined with its manager, status and selections.

    Write paths never load this object; each wizard step updates its own
    columns directly.
    """

    client_id: int
    business_name: str | None = None
    address_street: str | None = None
    address_city: str | None = None
    address_state: str | None = None
    address_zip: str | None = None
    website: str | None = None
    phone: str | None = None
    hours_of_operation: str | None = None
    micromarket_location: str | None = None
    neighborhood_info: str | None = None
    demographics: str | None = None
    number_of_people: int | None = None
    target_age_group: str | None = None
    industry: str | None = None
    dimensions: str | None = None
    wugs_visit: bool | None = None
    pictures: list[str] = field(default_factory=list)
    contract: list[str] = field(default_factory=list)
    last_active: datetime | None = None
    status_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    service_names: list[str] = field(default_factory=list)
    product_types: list[str] = field(default_factory=list)
    product_ids: list[int] = field(default_factory=list)
