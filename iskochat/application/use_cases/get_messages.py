from __future__ import annotations

from iskochat.application.exceptions import ConstraintViolation
from iskochat.application.ports.conversation_store import ConversationStorePort
from iskochat.application.use_cases.prioritization import rank_messages
from iskochat.domain.entities.message import Message


class GetMessagesUseCase:
    def __init__(self, store: ConversationStorePort) -> None:
        self._store = store

    def execute(self, participant_id: str, conversation_id: str) -> list[Message]:
        conversation = self._store.get_conversation(conversation_id)
        if not conversation.includes(participant_id):
            raise ConstraintViolation(f"Conversation {conversation_id} does not include participant {participant_id}")
        return rank_messages(conversation.messages)
