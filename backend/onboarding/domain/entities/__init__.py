from .attachment import AttachmentKind, AttachmentUpload
from .client_profile import ClientProfile
from .selection import RelationKind, SelectionDiff, diff_selection

__all__ = [
    "AttachmentKind",
    "AttachmentUpload",
    "ClientProfile",
    "RelationKind",
    "SelectionDiff",
    "diff_selection",
]
