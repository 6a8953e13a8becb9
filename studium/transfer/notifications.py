import itertools
import time
from typing import Callable, List, Literal, Optional
from pydantic import BaseModel

NotificationKind = Literal["info", "success", "warning", "error"]


class Notification(BaseModel):
    id: int
    kind: NotificationKind
    message: str
    created_at: float
    ttl: Optional[float] = None  # None = stays until dismissed

    def expired(self, now: float) -> bool:
        return self.ttl is not None and now - self.created_at >= self.ttl


class NotificationQueue:
    """Timed, dismissible notifications. Expired items are pruned on read."""

    def __init__(self, default_ttl: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._ids = itertools.count(1)
        self._items: List[Notification] = []

    def push(self, kind: NotificationKind, message: str, ttl: Optional[float] = -1.0) -> Notification:
        # ttl=-1 means "use the queue default"
        if ttl is not None and ttl < 0:
            ttl = self.default_ttl
        item = Notification(id=next(self._ids), kind=kind, message=message, created_at=self._clock(), ttl=ttl)
        self._items.append(item)
        return item

    def dismiss(self, notification_id: int) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) != before

    def active(self) -> List[Notification]:
        now = self._clock()
        self._items = [n for n in self._items if not n.expired(now)]
        return list(self._items)
