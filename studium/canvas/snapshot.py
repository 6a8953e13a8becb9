"""
Snapshot encoder: turns the current render surface into a JPEG payload
that can travel inside a JSON body (base64, no data-URI prefix).
"""
import base64
import io
import logging
from pydantic import BaseModel
from .render import RenderSurface
from ..errors import SnapshotEncodingError
from ..utils import strip_data_uri

logger = logging.getLogger("snapshot")


class Snapshot(BaseModel):
    data: str  # base64 payload, no "data:" prefix
    mime_type: str = "image/jpeg"
    width: int
    height: int
    stroke_count: int = 0


class SnapshotEncoder:
    def __init__(self, surface: RenderSurface, quality: int = 80):
        self.surface = surface
        self.quality = quality

    def capture(self, stroke_count: int = 0) -> Snapshot:
        # Raises CaptureUnavailable before anything is encoded
        image = self.surface.image
        try:
            buffer = io.BytesIO()
            # 1:1 pixel ratio: the encoded image is exactly the surface size
            image.save(buffer, format="JPEG", quality=self.quality)
            encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
        except Exception as e:
            logger.exception("Snapshot encoding failed: %s", e)
            raise SnapshotEncodingError(str(e)) from e

        data_url = f"data:image/jpeg;base64,{encoded}"
        return Snapshot(
            data=strip_data_uri(data_url),
            width=image.width,
            height=image.height,
            stroke_count=stroke_count,
        )
