from typing import List, Literal, Optional
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, ValidationError
from .capture import PointerEvent
from .session import DrawingSession, SessionRegistry
from ..errors import CaptureUnavailable, EmptyCanvas, SessionNotFound

router = APIRouter(prefix="/api/v1/canvas", tags=["canvas"])


class SessionRequest(BaseModel):
    width: int = Field(ge=0)
    height: int = Field(ge=0)


class EventsRequest(BaseModel):
    events: List[PointerEvent]


class ToolRequest(BaseModel):
    color: Optional[str] = None
    width: Optional[float] = None


class TransferRequest(BaseModel):
    destination: Literal["analysis", "equations"]
    background: bool = True


def _registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def _session(request: Request, session_id: str) -> DrawingSession:
    try:
        return _registry(request).get(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


def _describe(session: DrawingSession) -> dict:
    return {
        "session_id": session.id,
        "width": session.surface.width,
        "height": session.surface.height,
        "ready": session.surface.ready,
        "can_transfer": session.can_transfer,
        "tool": session.capture.tool.model_dump(),
        "strokes": [s.model_dump() for s in session.strokes],
    }


@router.post("/sessions")
async def open_session(body: SessionRequest, request: Request):
    session = _registry(request).create(body.width, body.height)
    return _describe(session)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, request: Request):
    return _describe(_session(request, session_id))


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str, request: Request):
    try:
        _registry(request).close(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"session_id": session_id, "status": "closed"}


@router.post("/sessions/{session_id}/events")
async def push_events(session_id: str, body: EventsRequest, request: Request):
    """
    Feeds pointer events (down/move/up/cancel) in arrival order.
    """
    session = _session(request, session_id)
    session.capture.handle_all(body.events)
    return {"stroke_count": len(session.strokes), "drawing": session.strokes.open_stroke is not None}


@router.put("/sessions/{session_id}/tool")
async def set_tool(session_id: str, body: ToolRequest, request: Request):
    session = _session(request, session_id)
    try:
        tool = session.capture.set_tool(color=body.color, width=body.width)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid tool settings: {e.error_count()} error(s)")
    return tool.model_dump()


@router.put("/sessions/{session_id}/size")
async def resize(session_id: str, body: SessionRequest, request: Request):
    session = _session(request, session_id)
    session.resize(body.width, body.height)
    return _describe(session)


@router.delete("/sessions/{session_id}/strokes")
async def clear_strokes(session_id: str, request: Request):
    session = _session(request, session_id)
    session.clear()
    return {"stroke_count": 0}


@router.get("/sessions/{session_id}/snapshot")
async def snapshot(session_id: str, request: Request):
    session = _session(request, session_id)
    try:
        snap = session.snapshot_for_transfer()
    except EmptyCanvas as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CaptureUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {
        "imageData": snap.data,
        "mimeType": snap.mime_type,
        "width": snap.width,
        "height": snap.height,
        "strokeCount": snap.stroke_count,
    }


@router.post("/sessions/{session_id}/transfer")
def transfer(session_id: str, body: TransferRequest, request: Request):
    """
    Captures the canvas and sends it to the analysis or equation collaborator.
    background=True returns at once with a transfer id to poll.
    """
    session = _session(request, session_id)
    try:
        snap = session.snapshot_for_transfer()
    except EmptyCanvas as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CaptureUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    dispatcher = request.app.state.dispatcher
    if body.background:
        record = dispatcher.dispatch_async(snap, body.destination)
        return {
            "transfer_id": record.id,
            "status": "sending",
            "result_url": f"/api/v1/transfers/{record.id}",
        }

    result = dispatcher.transfer(snap, body.destination)
    return {"result": result.model_dump()}
