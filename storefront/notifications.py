"""
User-facing notifications

Every failure path in the cart and checkout flow ends in a notification.
UI layers subscribe to the notifier and render each one as a toast.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    Severity.SUCCESS: logging.INFO,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass
class Notification:
    """A single message shown to the user"""
    message: str
    severity: Severity
    duration_ms: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


Listener = Callable[[Notification], None]


class Notifier:
    """Collects notifications and fans them out to subscribers"""

    def __init__(self, history_limit: int = 100):
        self.history: list[Notification] = []
        self._history_limit = history_limit
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        duration_ms: Optional[int] = None,
    ) -> Notification:
        notification = Notification(
            message=message,
            severity=severity,
            duration_ms=duration_ms,
        )
        logger.log(_LOG_LEVELS[severity], f"[{severity.value}] {message}")

        self.history.append(notification)
        if len(self.history) > self._history_limit:
            self.history = self.history[-self._history_limit:]

        for listener in list(self._listeners):
            listener(notification)
        return notification

    def success(self, message: str, duration_ms: Optional[int] = None) -> Notification:
        return self.notify(message, Severity.SUCCESS, duration_ms)

    def info(self, message: str, duration_ms: Optional[int] = None) -> Notification:
        return self.notify(message, Severity.INFO, duration_ms)

    def warning(self, message: str, duration_ms: Optional[int] = None) -> Notification:
        return self.notify(message, Severity.WARNING, duration_ms)

    def error(self, message: str, duration_ms: Optional[int] = None) -> Notification:
        return self.notify(message, Severity.ERROR, duration_ms)

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None
