import itertools
import time
from typing import Callable, Tuple

from .domain import Notification

SEVERITIES = ("error", "success", "warning")


class NotificationQueue:
    """
    Очередь коротких сообщений для интерфейса.
    Истечение считается по времени создания + ttl при чтении, без таймеров.
    при ttl = 0 сообщения живут до явного удаления.
    """

    def __init__(self, ttl: float = 3.0, clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self._clock = clock
        self._ids = itertools.count(1)
        self.items: Tuple[Notification, ...] = ()

    def add(self, message: str, type: str = "success") -> Notification:
        if type not in SEVERITIES:
            raise ValueError(f"Unknown notification type: {type}")
        notification = Notification(
            id=str(next(self._ids)),
            message=message,
            type=type,
            created_at=self._clock(),
        )
        self.items = self.items + (notification,)
        return notification

    def remove(self, notification_id: str) -> None:
        self.items = tuple(n for n in self.items if n.id != notification_id)

    def clear(self) -> None:
        self.items = ()

    def active(self) -> Tuple[Notification, ...]:
        """Сбрасывает просроченные сообщения и возвращает оставшиеся"""
        if self.ttl > 0:
            now = self._clock()
            self.items = tuple(n for n in self.items if now - n.created_at < self.ttl)
        return self.items

    @property
    def count(self) -> int:
        return len(self.active())
