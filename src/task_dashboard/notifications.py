from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationKind(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    message: str


class NotificationSink(Protocol):
    """Fire-and-forget receiver of user-facing events (toasts, console lines)."""

    def notify(self, notification: Notification) -> None: ...


class LoggingNotifier:
    _LEVELS = {
        NotificationKind.SUCCESS: logging.INFO,
        NotificationKind.INFO: logging.INFO,
        NotificationKind.ERROR: logging.WARNING,
    }

    def notify(self, notification: Notification) -> None:
        logger.log(self._LEVELS[notification.kind], "[%s] %s", notification.kind, notification.message)
