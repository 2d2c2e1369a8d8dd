from __future__ import annotations

from dataclasses import dataclass

from iskochat.application.ports.conversation_store import ConversationStorePort
from iskochat.application.use_cases.prioritization import (
    RankingSignals,
    filter_active_transactions,
    filter_priority,
    filter_unread,
    most_recent_activity,
    total_unread_count,
)


@dataclass(frozen=True)
class ConversationStats:
    conversations: int
    unread_conversations: int
    unread_messages: int
    priority_conversations: int
    active_transactions: int
    last_activity_at: float | None


class ConversationStatsUseCase:
    """Inbox badge counts for one participant."""

    def __init__(self, store: ConversationStorePort, signals: RankingSignals | None = None) -> None:
        self._store = store
        self._priority = signals.priority_participants if signals else frozenset()

    def execute(self, participant_id: str) -> ConversationStats:
        conversations = self._store.list_for_participant(participant_id)
        return ConversationStats(
            conversations=len(conversations),
            unread_conversations=len(filter_unread(participant_id, conversations)),
            unread_messages=total_unread_count(participant_id, conversations),
            priority_conversations=len(filter_priority(participant_id, conversations, self._priority)),
            active_transactions=len(filter_active_transactions(conversations)),
            last_activity_at=most_recent_activity(conversations),
        )
