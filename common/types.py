"""Shared data type definitions (MediaKind, FileRecord)."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional


class MediaKind(str, Enum):
    """
    Kind of media payload, selects the delivery method.
    """
    DOCUMENT = "document"
    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"


@dataclass(frozen=True)
class FileRecord:
    """
    A stored, keyword-tagged reference to a deliverable media payload.
    """
    file_id: str
    display_name: str
    keywords: FrozenSet[str]
    caption: Optional[str]
    media_kind: MediaKind
    added_by: str
    added_at: datetime

    @property
    def delivery_caption(self) -> str:
        return self.caption or self.display_name
