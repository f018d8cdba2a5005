"""Bot-specific event and reply type definitions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class TextEvent:
    user_id: str
    chat_id: str
    text: str
    first_name: Optional[str] = None


@dataclass(frozen=True)
class CommandEvent:
    user_id: str
    chat_id: str
    command: str
    args: str = ""
    first_name: Optional[str] = None


@dataclass(frozen=True)
class UploadEvent:
    user_id: str
    chat_id: str
    media_kind: str
    file_id: str
    file_name: Optional[str] = None
    caption: Optional[str] = None


@dataclass(frozen=True)
class SelectionEvent:
    user_id: str
    chat_id: str
    data: str


class ReplyKind(str, Enum):
    GREETING = "greeting"
    HELP = "help"
    ACCOUNT = "account"
    RESULTS = "results"
    NO_RESULTS = "no_results"
    QUOTA_EXCEEDED = "quota_exceeded"
    EXPIRED = "expired"
    DELIVERED = "delivered"
    DELIVERY_FAILED = "delivery_failed"
    UPLOAD_SAVED = "upload_saved"
    UPLOAD_REJECTED = "upload_rejected"
    FORBIDDEN = "forbidden"
    DELETED = "deleted"
    NOT_DELETED = "not_deleted"
    LOOKUP = "lookup"
    USAGE = "usage"
    UNKNOWN_COMMAND = "unknown_command"


@dataclass(frozen=True)
class Choice:
    """
    One selectable button: label shown to the user, data sent back on click.
    """
    label: str
    data: str


@dataclass
class Reply:
    """
    What the front-end should render for one event.
    """
    kind: ReplyKind
    text: str
    choices: List[Choice] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    total_matches: Optional[int] = None
    file_id: Optional[str] = None
    parse_mode: Optional[str] = None
