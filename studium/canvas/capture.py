from typing import Iterable, Literal, Optional
from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .models import Point, StrokeCollection


class PointerEvent(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    kind: Literal["down", "move", "up", "cancel"]
    x: float = 0.0
    y: float = 0.0
    pointer_id: Optional[int] = None  # accepted but not used to split strokes


class ToolState(BaseModel):
    color: str = "#ef4444"
    width: float = Field(default=3.0, gt=0)

    @field_validator("color")
    @classmethod
    def _paintable(cls, value: str) -> str:
        ImageColor.getrgb(value)  # ValueError for anything Pillow cannot paint
        return value


class InputCapture:
    """
    Translates pointer events into stroke updates.
    One stroke at a time: extra pointers feed the open stroke, they never start their own.
    """

    def __init__(self, strokes: StrokeCollection, tool: Optional[ToolState] = None):
        self.strokes = strokes
        self.tool = tool or ToolState()

    def set_tool(self, color: Optional[str] = None, width: Optional[float] = None) -> ToolState:
        # validators only run on construction
        self.tool = ToolState(
            color=self.tool.color if color is None else color,
            width=self.tool.width if width is None else width,
        )
        return self.tool

    def handle(self, event: PointerEvent) -> None:
        if event.kind == "down":
            self.strokes.begin_stroke(Point(x=event.x, y=event.y), self.tool.color, self.tool.width)
        elif event.kind == "move":
            self.strokes.extend_stroke(Point(x=event.x, y=event.y))
        else:
            self.strokes.end_stroke()

    def handle_all(self, events: Iterable[PointerEvent]) -> None:
        for event in events:
            self.handle(event)
