from functools import lru_cache
import logging

from iskochat.core.config import settings
from iskochat.application.ports.conversation_store import ConversationStorePort
from iskochat.application.ports.notifier import NotificationPort
from iskochat.application.use_cases.conversation_stats import ConversationStatsUseCase
from iskochat.application.use_cases.get_messages import GetMessagesUseCase
from iskochat.application.use_cases.list_conversations import ListConversationsUseCase
from iskochat.application.use_cases.manage_meetup import MeetupUseCase
from iskochat.application.use_cases.mark_read import MarkReadUseCase
from iskochat.application.use_cases.prioritization import RankingSignals
from iskochat.application.use_cases.send_message import SendMessageUseCase
from iskochat.domain.entities.feature import FeatureFlags
from iskochat.infrastructure.notifications.http_push import HttpPushNotifier
from iskochat.infrastructure.notifications.mock_notifier import MockNotifier
from iskochat.infrastructure.presence.memory_presence import MemoryPresenceTracker
from iskochat.infrastructure.store.json_store import JsonConversationStore
from iskochat.infrastructure.store.memory_store import MemoryConversationStore


_conversation_store: ConversationStorePort | None = None
_presence_tracker: MemoryPresenceTracker | None = None


def get_conversation_store() -> ConversationStorePort:
    global _conversation_store
    if _conversation_store is None:
        provider = (settings.STORE_PROVIDER or "").lower()
        if not provider:
            provider = "json" if settings.ENV.lower() in {"dev", "local"} else "memory"
        if provider == "json":
            _conversation_store = JsonConversationStore(data_dir=settings.DATA_DIR)
        elif provider == "memory":
            _conversation_store = MemoryConversationStore()
        else:
            raise ValueError(f"Unknown STORE_PROVIDER: {settings.STORE_PROVIDER}")
    return _conversation_store


def get_presence_tracker() -> MemoryPresenceTracker:
    global _presence_tracker
    if _presence_tracker is None:
        _presence_tracker = MemoryPresenceTracker()
    return _presence_tracker


@lru_cache
def get_notifier() -> NotificationPort:
    logger = logging.getLogger(__name__)
    if not settings.PUSH_ENDPOINT:
        logger.info("Using MockNotifier (PUSH_ENDPOINT missing)")
        return MockNotifier()
    logger.info("Using HttpPushNotifier", extra={"reason": settings.PUSH_ENDPOINT})
    return HttpPushNotifier(
        endpoint=settings.PUSH_ENDPOINT,
        api_key=settings.PUSH_API_KEY,
        timeout=settings.PUSH_TIMEOUT_SECONDS,
    )


def get_feature_flags() -> FeatureFlags:
    return FeatureFlags.from_switches(
        auto_reply=settings.AUTO_REPLY_ENABLED,
        priority_ranking=settings.PRIORITY_RANKING_ENABLED,
    )


def get_ranking_signals() -> RankingSignals:
    return RankingSignals(
        priority_participants=frozenset(settings.PRIORITY_PARTICIPANTS),
        favor_active_transactions=settings.FAVOR_ACTIVE_TRANSACTIONS,
    )


def get_list_conversations_use_case() -> ListConversationsUseCase:
    return ListConversationsUseCase(
        store=get_conversation_store(),
        flags=get_feature_flags(),
        signals=get_ranking_signals(),
    )


def get_messages_use_case() -> GetMessagesUseCase:
    return GetMessagesUseCase(store=get_conversation_store())


def get_send_message_use_case() -> SendMessageUseCase:
    return SendMessageUseCase(
        store=get_conversation_store(),
        presence=get_presence_tracker(),
        notifier=get_notifier(),
        flags=get_feature_flags(),
        auto_reply_text=settings.AUTO_REPLY_TEXT,
    )


def get_mark_read_use_case() -> MarkReadUseCase:
    return MarkReadUseCase(store=get_conversation_store())


def get_conversation_stats_use_case() -> ConversationStatsUseCase:
    return ConversationStatsUseCase(store=get_conversation_store(), signals=get_ranking_signals())


def get_meetup_use_case() -> MeetupUseCase:
    return MeetupUseCase(store=get_conversation_store(), admin_participants=settings.ADMIN_PARTICIPANTS)
