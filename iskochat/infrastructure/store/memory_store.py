from __future__ import annotations

import threading

from iskochat.application.exceptions import ConversationNotFoundError
from iskochat.application.ports.conversation_store import ConversationStorePort
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.message import Message


class MemoryConversationStore(ConversationStorePort):
    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._lock = threading.Lock()

    def get_conversation(self, conversation_id: str) -> Conversation:
        with self._lock:
            try:
                return self._conversations[conversation_id]
            except KeyError:
                raise ConversationNotFoundError(conversation_id) from None

    def list_for_participant(self, participant_id: str) -> list[Conversation]:
        with self._lock:
            return [c for c in self._conversations.values() if c.includes(participant_id)]

    def save_conversation(self, conversation: Conversation) -> None:
        with self._lock:
            self._conversations[conversation.id] = conversation

    def append_message(self, message: Message) -> Conversation:
        with self._lock:
            current = self._conversations.get(message.conversation_id)
            if current is None:
                raise ConversationNotFoundError(message.conversation_id)
            updated = current.appended(message)
            self._conversations[updated.id] = updated
            return updated

    def mark_read(self, conversation_id: str, participant_id: str) -> int:
        with self._lock:
            current = self._conversations.get(conversation_id)
            if current is None:
                raise ConversationNotFoundError(conversation_id)
            messages = []
            changed = 0
            for message in current.messages:
                if message.is_unread_for(participant_id):
                    message = message.marked_read(participant_id)
                    changed += 1
                messages.append(message)
            if changed:
                self._conversations[conversation_id] = current.with_changes(messages=tuple(messages))
            return changed
