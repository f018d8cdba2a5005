"""Pydantic schemas for API requests and responses."""

from filebot.schemas.events import (
    TextEventRequest,
    CommandEventRequest,
    UploadEventRequest,
    SelectionEventRequest,
    ChoiceResponse,
    ReplyResponse
)
from filebot.schemas.common import ErrorResponse

__all__ = [
    "TextEventRequest",
    "CommandEventRequest",
    "UploadEventRequest",
    "SelectionEventRequest",
    "ChoiceResponse",
    "ReplyResponse",
    "ErrorResponse"
]
