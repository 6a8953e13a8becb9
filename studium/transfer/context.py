import threading
from typing import Literal, Optional
from .destinations import ChatTranscript, EquationList, GraphList
from .notifications import NotificationQueue
from ..config import Settings, load_settings

Tab = Literal["chat", "voice", "flashcards", "quizzes", "summary", "equations", "graphs"]


class AppContext:
    """
    Everything a transfer may publish into, passed explicitly to handlers.
    Background transfers mutate it under `lock`.
    """

    def __init__(self, settings: Optional[Settings] = None, notifications: Optional[NotificationQueue] = None):
        self.settings = settings or load_settings()
        self.notifications = notifications or NotificationQueue(default_ttl=self.settings.notification_ttl)
        self.chat = ChatTranscript()
        self.equations = EquationList()
        self.graphs = GraphList()
        self.active_tab: Tab = "chat"
        self.lock = threading.RLock()
