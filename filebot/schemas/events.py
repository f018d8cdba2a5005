"""Pydantic schemas for inbound front-end events and bot replies."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class _EventBase(BaseModel):
    user_id: str = Field(..., min_length=1)
    chat_id: str = Field(..., min_length=1)

    @field_validator("user_id", "chat_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class TextEventRequest(_EventBase):
    """Request model for a free-text message."""
    text: str
    first_name: Optional[str] = None


class CommandEventRequest(_EventBase):
    """Request model for a slash command."""
    command: str = Field(..., min_length=1)
    args: str = ""
    first_name: Optional[str] = None


class UploadEventRequest(_EventBase):
    """Request model for media posted with a keyword caption."""
    media_kind: str
    file_id: str = Field(..., min_length=1)
    file_name: Optional[str] = None
    caption: Optional[str] = None


class SelectionEventRequest(_EventBase):
    """Request model for an inline button click."""
    data: str


class ChoiceResponse(BaseModel):
    label: str
    data: str


class ReplyResponse(BaseModel):
    """Response model describing what the front-end should render."""
    kind: str
    text: str
    choices: List[ChoiceResponse] = []
    suggestions: List[str] = []
    total_matches: Optional[int] = None
    file_id: Optional[str] = None
    parse_mode: Optional[str] = None
