"""Front-end event API routes."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from filebot.auth import verify_frontend_key
from filebot.orchestrator import RequestOrchestrator
from filebot.schemas.common import ErrorResponse
from filebot.schemas.events import (
    CommandEventRequest,
    ReplyResponse,
    SelectionEventRequest,
    TextEventRequest,
    UploadEventRequest,
)
from filebot.types import CommandEvent, Reply, SelectionEvent, TextEvent, UploadEvent

router = APIRouter(
    prefix="/events",
    tags=["Events"],
    dependencies=[Depends(verify_frontend_key)],
    responses={
        401: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)


def get_orchestrator(request: Request) -> RequestOrchestrator:
    return request.app.state.orchestrator


def to_response(reply: Reply) -> ReplyResponse:
    data = asdict(reply)
    data["kind"] = reply.kind.value
    return ReplyResponse(**data)


@router.post("/text", response_model=ReplyResponse)
async def text_event(
    request: TextEventRequest,
    orchestrator: RequestOrchestrator = Depends(get_orchestrator)
):
    """
    Free-text message: a keyword search, or a command when it starts with '/'.

    Returns:
        - kind: results, no_results, quota_exceeded, or a command reply kind
        - choices: one entry per result; send `data` back to /events/selection
        - total_matches: match count before paging

    Raises:
        - 401: Invalid front-end key
        - 503: Storage unavailable
    """
    reply = await orchestrator.handle_text(TextEvent(**request.model_dump()))
    return to_response(reply)


@router.post("/command", response_model=ReplyResponse)
async def command_event(
    request: CommandEventRequest,
    orchestrator: RequestOrchestrator = Depends(get_orchestrator)
):
    """
    Slash command (/start, /help, /myaccount, /delete <id>, /find <text>).
    """
    reply = await orchestrator.handle_command(CommandEvent(**request.model_dump()))
    return to_response(reply)


@router.post("/upload", response_model=ReplyResponse)
async def upload_event(
    request: UploadEventRequest,
    orchestrator: RequestOrchestrator = Depends(get_orchestrator)
):
    """
    Media posted with a caption. Admins only; the caption holds the keywords.

    Returns:
        - kind: upload_saved, usage (no keywords), upload_rejected or forbidden
    """
    reply = await orchestrator.handle_upload(UploadEvent(**request.model_dump()))
    return to_response(reply)


@router.post("/selection", response_model=ReplyResponse)
async def selection_event(
    request: SelectionEventRequest,
    orchestrator: RequestOrchestrator = Depends(get_orchestrator)
):
    """
    Inline button click: a result index from the last search, or search_<terms>.

    Returns:
        - kind: delivered, expired, quota_exceeded or delivery_failed
    """
    reply = await orchestrator.handle_selection(SelectionEvent(**request.model_dump()))
    return to_response(reply)
