import time
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    content: str
    image_data: Optional[str] = None
    timestamp: float = Field(default_factory=time.time)


class GraphEntry(BaseModel):
    equation: str
    graph_equation: str


class ChatTranscript:
    """Append-only, ordered chat log."""

    def __init__(self):
        self._messages: List[ChatMessage] = []

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)


class EquationList:
    def __init__(self):
        self._equations: List[str] = []

    def replace(self, equations: List[str]) -> None:
        self._equations = list(equations)

    def get(self, index: int) -> str:
        return self._equations[index]

    @property
    def equations(self) -> List[str]:
        return list(self._equations)


class GraphList:
    def __init__(self):
        self._graphs: List[GraphEntry] = []

    def append(self, entry: GraphEntry) -> None:
        self._graphs.append(entry)

    @property
    def graphs(self) -> List[GraphEntry]:
        return list(self._graphs)
