from __future__ import annotations

import logging

from iskochat.application.exceptions import ConstraintViolation
from iskochat.application.ports.conversation_store import ConversationStorePort


class MarkReadUseCase:
    def __init__(self, store: ConversationStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def execute(self, participant_id: str, conversation_id: str) -> int:
        conversation = self._store.get_conversation(conversation_id)
        if not conversation.includes(participant_id):
            raise ConstraintViolation(f"Conversation {conversation_id} does not include participant {participant_id}")
        updated = self._store.mark_read(conversation_id, participant_id)
        self._logger.info(
            "Messages marked read",
            extra={"conversation_id": conversation_id, "participant_id": participant_id, "count": updated},
        )
        return updated
