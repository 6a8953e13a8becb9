class StudiumError(Exception):
    """Base class for errors raised by the canvas pipeline."""


class StrokeClosedError(StudiumError):
    """Raised when points are appended to a stroke that has been closed."""


class CaptureUnavailable(StudiumError):
    """The render surface is not ready (not yet sized)."""


class SnapshotEncodingError(StudiumError):
    """Encoding the surface to a still image failed."""


class EmptyCanvas(StudiumError):
    """A transfer was requested with no closed strokes on the canvas."""


class SessionNotFound(StudiumError):
    def __init__(self, session_id: str):
        super().__init__(f"Drawing session not found: {session_id}")
        self.session_id = session_id
