"""Transient, auto-dismissing user notifications."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
import uuid

from aapda_mitra.config import NOTIFICATION_TTL_SEC


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    """A single toast shown to the user."""
    kind: NotificationKind
    message: str
    created_at: float
    expires_at: float
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.kind.value,
            "message": self.message,
        }


class NotificationCenter:
    """
    Holds notifications until they expire.

    Expiry is evaluated lazily against ``now_fn`` whenever notifications are
    pushed or read, so no timers are involved.
    """

    def __init__(
        self,
        ttl_sec: float = NOTIFICATION_TTL_SEC,
        now_fn: Callable[[], float] = time.monotonic,
    ):
        self.ttl_sec = ttl_sec
        self._now_fn = now_fn
        self._notifications: list[Notification] = []

    def push(self, kind: NotificationKind, message: str) -> Notification:
        now = self._now_fn()
        notification = Notification(
            kind=NotificationKind(kind),
            message=message,
            created_at=now,
            expires_at=now + self.ttl_sec,
        )
        self._prune(now)
        self._notifications.append(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.push(NotificationKind.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.push(NotificationKind.ERROR, message)

    def active(self) -> list[Notification]:
        """Notifications that have not yet been dismissed, oldest first."""
        self._prune(self._now_fn())
        return list(self._notifications)

    def _prune(self, now: float) -> None:
        self._notifications = [n for n in self._notifications if n.expires_at > now]

    def clear(self) -> None:
        self._notifications = []

    def __len__(self) -> int:
        return len(self.active())
