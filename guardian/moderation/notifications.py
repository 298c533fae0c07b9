"""
Notification Center
Ephemeral user-facing notifications (toasts) emitted by the pipeline
"""

import logging
from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable

logger = logging.getLogger(__name__)

INFO = "info"
ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A single toast for the presentation layer"""

    title: str
    description: str
    severity: str = INFO  # info, error
    seq: int = 0
    timestamp: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "seq": self.seq,
            "title": self.title,
            "description": self.description,
            "severity": self.severity,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


Subscriber = Callable[[Notification], None]


class NotificationCenter:
    """
    Fan-out of notifications to subscribers plus a bounded history.

    Each published notification gets a monotonically increasing ``seq`` so
    polling clients can ask for everything after the last one they saw.
    """

    def __init__(self, history: int = 100, clock: Callable[[], datetime] = datetime.now):
        self._history: deque[Notification] = deque(maxlen=max(1, history))
        self._subscribers: list[Subscriber] = []
        self._seq = 0
        self._clock = clock

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, notification: Notification) -> Notification:
        self._seq += 1
        stamped = replace(notification, seq=self._seq, timestamp=self._clock())
        self._history.append(stamped)

        log = logger.warning if stamped.severity == ERROR else logger.info
        log(f"[{stamped.severity}] {stamped.title}: {stamped.description}")

        for callback in list(self._subscribers):
            try:
                callback(stamped)
            except Exception as e:
                logger.error(f"Notification subscriber failed: {e}")
        return stamped

    def info(self, title: str, description: str) -> Notification:
        return self.publish(Notification(title=title, description=description, severity=INFO))

    def error(self, title: str, description: str) -> Notification:
        return self.publish(Notification(title=title, description=description, severity=ERROR))

    def since(self, seq: int = 0) -> list[Notification]:
        """Notifications newer than ``seq`` still held in history, oldest first"""
        return [n for n in self._history if n.seq > seq]

    @property
    def last_seq(self) -> int:
        return self._seq
