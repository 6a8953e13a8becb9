import itertools
import time
from typing import Callable, List, Optional
from pydantic import BaseModel, ConfigDict
from ..errors import StrokeClosedError

_stroke_counter = itertools.count(1)


def next_stroke_id() -> str:
    # process-wide counter + ms timestamp
    return f"stroke_{next(_stroke_counter)}_{int(time.time() * 1000)}"


class Point(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float


class Stroke(BaseModel):
    id: str
    points: List[Point]
    color: str = "#ef4444"
    width: float = 3.0
    completed: bool = False

    def append(self, point: Point) -> None:
        if self.completed:
            raise StrokeClosedError(f"Stroke {self.id} is closed")
        self.points.append(point)


class StrokeCollection:
    """
    Ordered strokes of one drawing session. Insertion order is z-order.
    Only the last stroke may still be open; listeners fire after every mutation.
    """

    def __init__(self):
        self._strokes: List[Stroke] = []
        self._listeners: List[Callable[["StrokeCollection"], None]] = []

    def __len__(self) -> int:
        return len(self._strokes)

    def __iter__(self):
        return iter(self._strokes)

    @property
    def strokes(self) -> List[Stroke]:
        return list(self._strokes)

    @property
    def open_stroke(self) -> Optional[Stroke]:
        if self._strokes and not self._strokes[-1].completed:
            return self._strokes[-1]
        return None

    @property
    def closed_count(self) -> int:
        return sum(1 for s in self._strokes if s.completed)

    def subscribe(self, listener: Callable[["StrokeCollection"], None]) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in self._listeners:
            listener(self)

    def begin_stroke(self, point: Point, color: str, width: float) -> Optional[Stroke]:
        if self.open_stroke is not None:
            return None
        stroke = Stroke(id=next_stroke_id(), points=[point], color=color, width=width)
        self._strokes.append(stroke)
        self._changed()
        return stroke

    def extend_stroke(self, point: Point) -> None:
        stroke = self.open_stroke
        if stroke is None:
            return
        stroke.append(point)
        self._changed()

    def end_stroke(self) -> None:
        stroke = self.open_stroke
        if stroke is None:
            return
        stroke.completed = True
        self._changed()

    def clear(self) -> None:
        self._strokes = []
        self._changed()
