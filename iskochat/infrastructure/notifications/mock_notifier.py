from __future__ import annotations

import logging
import threading

from iskochat.application.ports.notifier import NotificationPort
from iskochat.domain.entities.message import Message


class MockNotifier(NotificationPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self.delivered: list[tuple[str, str]] = []

    def deliver(self, recipient_id: str, message: Message) -> None:
        with self._lock:
            self.delivered.append((recipient_id, message.id))
        self._logger.info(
            "Mock push notification",
            extra={"recipient_id": recipient_id, "message_id": message.id, "conversation_id": message.conversation_id},
        )
