"""Attachment kinds and the upload unit handed to file storage."""

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO


class AttachmentKind(str, Enum):
    """Ordered URL lists kept on a client."""

    PICTURES = "pictures"
    CONTRACT = "contract"


@dataclass
class AttachmentUpload:
    """One file of an upload batch: a readable stream plus its metadata."""

    filename: str
    mime_type: str
    stream: BinaryIO

    def read(self) -> bytes:
        return self.stream.read()
