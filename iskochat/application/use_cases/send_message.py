from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable

from iskochat.application.exceptions import ConstraintViolation, NotificationDeliveryError
from iskochat.application.ports.conversation_store import ConversationStorePort
from iskochat.application.ports.notifier import NotificationPort
from iskochat.application.ports.presence import PresencePort
from iskochat.application.use_cases.auto_reply import build_auto_reply, should_trigger_auto_reply
from iskochat.application.use_cases.notification_gate import recipients_to_notify
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.feature import Feature, FeatureFlags
from iskochat.domain.entities.message import Message


@dataclass(frozen=True)
class SendResult:
    message: Message
    notified: list[str] = field(default_factory=list)
    auto_reply: Message | None = None


def _new_message_id() -> str:
    return uuid.uuid4().hex


class SendMessageUseCase:
    def __init__(
        self,
        store: ConversationStorePort,
        presence: PresencePort,
        notifier: NotificationPort,
        flags: FeatureFlags,
        auto_reply_text: str = "",
        id_factory: Callable[[], str] = _new_message_id,
    ) -> None:
        self._store = store
        self._presence = presence
        self._notifier = notifier
        self._flags = flags
        self._auto_reply_text = auto_reply_text
        self._id_factory = id_factory
        self._logger = logging.getLogger(__name__)

    def execute(self, conversation_id: str, sender_id: str, body: str, now_ts: float | None = None) -> SendResult:
        text = (body or "").strip()
        if not text:
            raise ValueError("Message body cannot be empty")

        conversation = self._store.get_conversation(conversation_id)
        if not conversation.includes(sender_id):
            raise ConstraintViolation(f"Conversation {conversation_id} does not include participant {sender_id}")

        message = Message(
            id=self._id_factory(),
            conversation_id=conversation_id,
            sender_id=sender_id,
            sent_at=time.time() if now_ts is None else now_ts,
            body=text,
            read_by={sender_id: True},
        )
        conversation = self._store.append_message(message)
        self._logger.info(
            "Message stored",
            extra={"conversation_id": conversation_id, "message_id": message.id, "participant_id": sender_id},
        )

        notified = self._notify(conversation, message)

        auto_reply = None
        if self._flags.is_enabled(Feature.auto_reply) and should_trigger_auto_reply(conversation):
            auto_reply = build_auto_reply(conversation, self._auto_reply_text, message.sent_at, self._id_factory())
            conversation = self._store.append_message(auto_reply)
            self._logger.info(
                "Auto-reply sent",
                extra={"conversation_id": conversation_id, "message_id": auto_reply.id, "reason": "first_buyer_message"},
            )
            self._notify(conversation, auto_reply)

        return SendResult(message=message, notified=notified, auto_reply=auto_reply)

    def _notify(self, conversation: Conversation, message: Message) -> list[str]:
        snapshot = self._presence.snapshot()
        delivered: list[str] = []
        for recipient_id in recipients_to_notify(conversation, message, snapshot):
            try:
                self._notifier.deliver(recipient_id, message)
            except NotificationDeliveryError as e:
                self._logger.warning(
                    "Notification not delivered",
                    extra={"recipient_id": recipient_id, "message_id": message.id, "reason": str(e)},
                )
                continue
            delivered.append(recipient_id)
        return delivered
