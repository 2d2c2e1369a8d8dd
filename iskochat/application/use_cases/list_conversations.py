from __future__ import annotations

import logging
from enum import Enum

from iskochat.application.ports.conversation_store import ConversationStorePort
from iskochat.application.use_cases.prioritization import (
    RankingSignals,
    filter_active_transactions,
    filter_priority,
    filter_unread,
    rank_conversations,
)
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.feature import Feature, FeatureFlags


class ConversationFilter(str, Enum):
    all = "all"
    unread = "unread"
    priority = "priority"
    active = "active"


class ListConversationsUseCase:
    def __init__(
        self,
        store: ConversationStorePort,
        flags: FeatureFlags,
        signals: RankingSignals | None = None,
    ) -> None:
        self._store = store
        self._flags = flags
        self._signals = signals
        self._logger = logging.getLogger(__name__)

    def execute(self, participant_id: str, view: ConversationFilter = ConversationFilter.all) -> list[Conversation]:
        conversations = self._store.list_for_participant(participant_id)
        if view is ConversationFilter.unread:
            conversations = filter_unread(participant_id, conversations)
        elif view is ConversationFilter.priority:
            priority = self._signals.priority_participants if self._signals else frozenset()
            conversations = filter_priority(participant_id, conversations, priority)
        elif view is ConversationFilter.active:
            conversations = filter_active_transactions(conversations)

        signals = self._signals if self._flags.is_enabled(Feature.priority_ranking) else None
        ranked = rank_conversations(participant_id, conversations, signals=signals)
        self._logger.debug(
            "Conversations ranked",
            extra={"participant_id": participant_id, "count": len(ranked), "reason": view.value},
        )
        return ranked
