from .attachment_linker import AttachmentLinker
from .client_profile_service import ClientProfileService
from .relation_reconciler import RelationReconciler
from .step_updater import StepUpdater

__all__ = [
    "AttachmentLinker",
    "ClientProfileService",
    "RelationReconciler",
    "StepUpdater",
]
