"""Pydantic payloads for the onboarding wizard steps.

Each step is a strictly typed model tagged by ``step``. Unknown keys are
dropped, missing optional keys are left out of the update, and anything
that fails validation becomes a StepValidationError before storage is
reached.
"""

import re
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
)

from onboarding.domain.exceptions import StepValidationError

_DIGITS = re.compile(r"^\d+$")

# Primary keys are 32-bit INTEGER columns
MAX_IDENTIFIER = 2**31 - 1

PositiveId = Annotated[int, Field(gt=0, le=MAX_IDENTIFIER)]


def parse_identifier(value: Any, name: str = "client_id", *, step: str = "request") -> int:
    """Validate a numeric identifier coming from a route or payload."""
    if isinstance(value, bool):
        raise StepValidationError(step, f"{name} must be an integer")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and _DIGITS.match(value.strip()):
        digits = value.strip().lstrip("0") or "0"
        if len(digits) > len(str(MAX_IDENTIFIER)):
            raise StepValidationError(step, f"{name} is out of range")
        parsed = int(digits)
    else:
        raise StepValidationError(step, f"{name} must be an integer, got {value!r}")
    if parsed <= 0:
        raise StepValidationError(step, f"{name} must be positive")
    if parsed > MAX_IDENTIFIER:
        raise StepValidationError(step, f"{name} is out of range")
    return parsed


class _WizardStep(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @classmethod
    def accepted_fields(cls) -> tuple[str, ...]:
        """Field names this step writes, in declaration order."""
        return tuple(name for name in cls.model_fields if name != "step")

    def changes(self) -> dict[str, Any]:
        """Submitted fields only: absent optional fields stay untouched."""
        return self.model_dump(exclude_unset=True, exclude={"step"})


class LocationStep(_WizardStep):
    step: Literal["location"] = "location"

    business_name: str = Field(..., min_length=1, max_length=255)
    address_street: str = Field(..., min_length=1, max_length=255)
    address_city: str = Field(..., min_length=1, max_length=120)
    address_state: str = Field(..., min_length=2, max_length=50)
    address_zip: str = Field(..., pattern=r"^\d{5}(-\d{4})?$")
    website: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=30)
    hours_of_operation: str | None = Field(None, max_length=255)
    micromarket_location: str | None = Field(None, max_length=255)


class DemographicsStep(_WizardStep):
    step: Literal["demographics"] = "demographics"

    number_of_people: int | None = Field(None, ge=0)
    demographics: str | None = None
    neighborhood_info: str | None = None
    industry: str | None = Field(None, max_length=120)
    target_age_group: str | None = Field(
        None,
        max_length=120,
        validation_alias=AliasChoices("target_age_group", "age_group"),
    )


class AdditionalInfoStep(_WizardStep):
    step: Literal["additionalInfo"] = "additionalInfo"

    dimensions: str | None = Field(None, max_length=255)
    wugs_visit: bool | None = None


class ServiceChoiceStep(_WizardStep):
    step: Literal["serviceChoice"] = "serviceChoice"

    service_ids: list[PositiveId] = Field(
        ..., validation_alias=AliasChoices("service_ids", "service_id")
    )

    def selected_ids(self) -> frozenset[int]:
        return frozenset(self.service_ids)


class ProductChoiceStep(_WizardStep):
    step: Literal["productChoice"] = "productChoice"

    product_ids: list[PositiveId] = Field(
        ..., validation_alias=AliasChoices("product_ids", "clickedButtons")
    )

    def selected_ids(self) -> frozenset[int]:
        return frozenset(self.product_ids)


class ContactStep(_WizardStep):
    step: Literal["contact"] = "contact"

    phone: str = Field(..., min_length=1, max_length=30)
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str = Field(..., min_length=1, max_length=120)
    username: str = Field(..., min_length=1, max_length=255)

    def client_changes(self) -> dict[str, Any]:
        return {"phone": self.phone}

    def account_changes(self) -> dict[str, Any]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "username": self.username,
        }


WizardStep = Annotated[
    Union[
        LocationStep,
        DemographicsStep,
        AdditionalInfoStep,
        ServiceChoiceStep,
        ProductChoiceStep,
        ContactStep,
    ],
    Field(discriminator="step"),
]

STEP_MODELS: dict[str, type[_WizardStep]] = {
    "location": LocationStep,
    "demographics": DemographicsStep,
    "additionalInfo": AdditionalInfoStep,
    "serviceChoice": ServiceChoiceStep,
    "productChoice": ProductChoiceStep,
    "contact": ContactStep,
}

_STEP_ADAPTER: TypeAdapter[WizardStep] = TypeAdapter(WizardStep)


def parse_step(step_name: str, fields: Mapping[str, Any] | None) -> WizardStep:
    """Build the typed payload for ``step_name`` or raise StepValidationError."""
    if step_name not in STEP_MODELS:
        raise StepValidationError(step_name, "unknown wizard step")
    if fields is None:
        fields = {}
    if not isinstance(fields, Mapping):
        raise StepValidationError(step_name, "payload must be an object")

    try:
        return _STEP_ADAPTER.validate_python({**fields, "step": step_name})
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False)
        invalid = ", ".join(".".join(str(p) for p in e["loc"][1:]) or "payload" for e in errors)
        raise StepValidationError(step_name, f"invalid fields: {invalid}", errors) from exc
