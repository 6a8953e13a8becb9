from typing import Iterable, List, Optional, Tuple
import numpy as np
from PIL import Image, ImageDraw
from .models import Stroke
from ..errors import CaptureUnavailable

TENSION = 0.5
SAMPLES_PER_SEGMENT = 8


def _bezier(p0, c0, c1, p1, steps: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, steps + 1)[1:, None]
    mt = 1.0 - t
    return (mt ** 3) * p0 + 3 * (mt ** 2) * t * c0 + 3 * mt * (t ** 2) * c1 + (t ** 3) * p1


def _quadratic(p0, c, p1, steps: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, steps + 1)[1:, None]
    mt = 1.0 - t
    return (mt ** 2) * p0 + 2 * mt * t * c + (t ** 2) * p1


def smooth_points(points: np.ndarray, tension: float = TENSION, steps: int = SAMPLES_PER_SEGMENT) -> np.ndarray:
    """
    Cardinal-spline smoothing of a polyline (N x 2).
    Control points around each interior vertex are offset along the neighbour chord,
    scaled by tension and the relative length of the adjacent segments.
    End segments are quadratic, interior segments cubic. Polylines of < 3 points pass through.
    """
    n = len(points)
    if n < 3 or tension == 0:
        return points

    prev_pts = points[:-2]
    mid_pts = points[1:-1]
    next_pts = points[2:]
    d01 = np.linalg.norm(mid_pts - prev_pts, axis=1)
    d12 = np.linalg.norm(next_pts - mid_pts, axis=1)
    total = d01 + d12
    safe = np.where(total == 0, 1.0, total)
    fa = np.where(total == 0, 0.0, tension * d01 / safe)[:, None]
    fb = np.where(total == 0, 0.0, tension * d12 / safe)[:, None]
    chord = next_pts - prev_pts
    ctrl_in = mid_pts - fa * chord    # control point arriving at vertex i
    ctrl_out = mid_pts + fb * chord   # control point leaving vertex i

    pieces: List[np.ndarray] = [points[:1]]
    pieces.append(_quadratic(points[0], ctrl_in[0], points[1], steps))
    for i in range(1, n - 2):
        pieces.append(_bezier(points[i], ctrl_out[i - 1], ctrl_in[i], points[i + 1], steps))
    pieces.append(_quadratic(points[n - 2], ctrl_out[-1], points[n - 1], steps))
    return np.vstack(pieces)


class RenderSurface:
    """Raster surface the strokes are painted on. Not ready until it has a non-zero size."""

    def __init__(self, width: int = 0, height: int = 0, background: str = "#ffffff"):
        self.background = background
        self.width = 0
        self.height = 0
        self._image: Optional[Image.Image] = None
        self.resize(width, height)

    @property
    def ready(self) -> bool:
        return self._image is not None

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            raise CaptureUnavailable("Render surface has not been sized yet")
        return self._image

    def resize(self, width: int, height: int) -> None:
        self.width = max(0, int(width))
        self.height = max(0, int(height))
        if self.width > 0 and self.height > 0:
            self._image = Image.new("RGB", (self.width, self.height), self.background)
        else:
            self._image = None

    def render(self, strokes: Iterable[Stroke]) -> None:
        """Full repaint of every stroke in insertion order."""
        if self._image is None:
            return
        img = Image.new("RGB", (self.width, self.height), self.background)
        draw = ImageDraw.Draw(img)
        for stroke in strokes:
            _draw_stroke(draw, stroke)
        self._image = img


def _draw_stroke(draw: ImageDraw.ImageDraw, stroke: Stroke) -> None:
    if not stroke.points:
        return
    width = max(1, int(round(stroke.width)))
    r = stroke.width / 2.0
    pts = np.array([[p.x, p.y] for p in stroke.points], dtype=float)
    path = smooth_points(pts)

    if len(path) > 1:
        coords = [(float(x), float(y)) for x, y in path]
        draw.line(coords, fill=stroke.color, width=width, joint="curve")

    # Round caps (and the dot for a single-point stroke)
    for x, y in (path[0], path[-1]):
        draw.ellipse([x - r, y - r, x + r, y + r], fill=stroke.color)
