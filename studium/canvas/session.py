import logging
import threading
import uuid
from typing import Dict, Optional
from .capture import InputCapture, ToolState
from .models import StrokeCollection
from .render import RenderSurface
from .snapshot import Snapshot, SnapshotEncoder
from ..config import Settings
from ..errors import EmptyCanvas, SessionNotFound

logger = logging.getLogger("session")


class DrawingSession:
    """One canvas view: strokes, the surface they are painted on, and its encoder."""

    def __init__(self, width: int, height: int, settings: Optional[Settings] = None, session_id: Optional[str] = None):
        settings = settings or Settings()
        self.id = session_id or str(uuid.uuid4())
        self.strokes = StrokeCollection()
        self.surface = RenderSurface(width, height, background=settings.background)
        self.capture = InputCapture(
            self.strokes,
            ToolState(color=settings.default_color, width=settings.default_width),
        )
        self.encoder = SnapshotEncoder(self.surface, quality=settings.jpeg_quality)
        self.strokes.subscribe(lambda strokes: self.surface.render(strokes))

    @property
    def can_transfer(self) -> bool:
        return self.surface.ready and self.strokes.closed_count > 0

    def resize(self, width: int, height: int) -> None:
        self.surface.resize(width, height)
        self.surface.render(self.strokes)

    def clear(self) -> None:
        self.strokes.clear()

    def snapshot(self) -> Snapshot:
        return self.encoder.capture(stroke_count=len(self.strokes))

    def snapshot_for_transfer(self) -> Snapshot:
        if self.strokes.closed_count == 0:
            raise EmptyCanvas("Draw something before transferring the canvas")
        return self.snapshot()


class SessionRegistry:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self._sessions: Dict[str, DrawingSession] = {}
        self._lock = threading.Lock()

    def create(self, width: int, height: int) -> DrawingSession:
        session = DrawingSession(width, height, self.settings)
        with self._lock:
            self._sessions[session.id] = session
        logger.info("Opened drawing session %s (%dx%d)", session.id, width, height)
        return session

    def get(self, session_id: str) -> DrawingSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def close(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)
        session.clear()
        logger.info("Closed drawing session %s", session_id)
