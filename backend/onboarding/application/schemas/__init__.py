from .onboarding import AttachmentUploadResponse, ClientProfileResponse, StepAcceptedResponse
from .wizard_steps import (
    STEP_MODELS,
    AdditionalInfoStep,
    ContactStep,
    DemographicsStep,
    LocationStep,
    ProductChoiceStep,
    ServiceChoiceStep,
    WizardStep,
    parse_identifier,
    parse_step,
)

__all__ = [
    "AttachmentUploadResponse",
    "ClientProfileResponse",
    "StepAcceptedResponse",
    "STEP_MODELS",
    "AdditionalInfoStep",
    "ContactStep",
    "DemographicsStep",
    "LocationStep",
    "ProductChoiceStep",
    "ServiceChoiceStep",
    "WizardStep",
    "parse_identifier",
    "parse_step",
]
