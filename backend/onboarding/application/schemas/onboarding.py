"""Pydantic DTOs (Data Transfer Objects) for the onboarding API."""

from datetime import datetime

from pydantic import BaseModel


class ClientProfileResponse(BaseModel):
    """Schema returned for a single client's assembled profile."""

    client_id: int
    business_name: str | None
    address_street: str | None
    address_city: str | None
    address_state: str | None
    address_zip: str | None
    website: str | None
    phone: str | None
    hours_of_operation: str | None
    micromarket_location: str | None
    neighborhood_info: str | None
    demographics: str | None
    number_of_people: int | None
    target_age_group: str | None
    industry: str | None
    dimensions: str | None
    wugs_visit: bool | None
    pictures: list[str]
    contract: list[str]
    last_active: datetime | None
    status_name: str | None
    first_name: str | None
    last_name: str | None
    username: str | None
    service_names: list[str]
    product_types: list[str]
    product_ids: list[int]

    model_config = {"from_attributes": True}


class StepAcceptedResponse(BaseModel):
    """Generic acknowledgement for a wizard step submission."""

    status: str = "accepted"


class AttachmentUploadResponse(BaseModel):
    """Acknowledgement for an upload batch with the appended URLs."""

    status: str = "accepted"
    urls: list[str]
