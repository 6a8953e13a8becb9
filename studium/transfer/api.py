from fastapi import APIRouter, HTTPException, Request
from .context import AppContext

router = APIRouter(prefix="/api/v1", tags=["transfer"])


def _context(request: Request) -> AppContext:
    return request.app.state.context


@router.get("/transfers/{transfer_id}")
async def get_transfer(transfer_id: str, request: Request):
    record = request.app.state.dispatcher.get(transfer_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Transfer not found: {transfer_id}")
    return record.model_dump()


@router.get("/chat")
async def chat_transcript(request: Request):
    ctx = _context(request)
    with ctx.lock:
        return {"messages": [m.model_dump() for m in ctx.chat.messages]}


@router.get("/equations")
async def equations(request: Request):
    ctx = _context(request)
    with ctx.lock:
        return {"equations": ctx.equations.equations, "active_tab": ctx.active_tab}


@router.post("/equations/{index}/graph")
def graph_equation(index: int, request: Request):
    ctx = _context(request)
    with ctx.lock:
        try:
            equation = ctx.equations.get(index)
        except IndexError:
            raise HTTPException(status_code=404, detail=f"No equation at index {index}")
    result = request.app.state.dispatcher.convert_to_graph(equation)
    return {"result": result.model_dump()}


@router.get("/graphs")
async def graphs(request: Request):
    ctx = _context(request)
    with ctx.lock:
        return {"graphs": [g.model_dump() for g in ctx.graphs.graphs]}


@router.get("/notifications")
async def notifications(request: Request):
    ctx = _context(request)
    with ctx.lock:
        return {"notifications": [n.model_dump() for n in ctx.notifications.active()]}


@router.delete("/notifications/{notification_id}")
async def dismiss_notification(notification_id: int, request: Request):
    ctx = _context(request)
    with ctx.lock:
        dismissed = ctx.notifications.dismiss(notification_id)
    if not dismissed:
        raise HTTPException(status_code=404, detail=f"Notification not found: {notification_id}")
    return {"id": notification_id, "status": "dismissed"}
