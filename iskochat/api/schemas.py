from pydantic import BaseModel, Field

from iskochat.application.use_cases.conversation_stats import ConversationStats
from iskochat.application.use_cases.prioritization import categorize_message
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.message import Message
from iskochat.domain.entities.participant import PresenceState


class MessageSchema(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    sent_at: float
    body: str
    kind: str = "text"
    is_automated: bool = False
    is_read: bool = False
    category: str = "read"  # "read" | "unread" for the viewer

    @staticmethod
    def from_entity(message: Message, viewer_id: str) -> "MessageSchema":
        category = categorize_message(message, viewer_id)
        return MessageSchema(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            sent_at=message.sent_at,
            body=message.body,
            kind=message.kind,
            is_automated=message.is_automated,
            is_read=category == "read",
            category=category,
        )


class ConversationSummarySchema(BaseModel):
    id: str
    participants: list[str]
    product_id: str | None = None
    unread_count: int
    last_activity_at: float | None = None
    last_message: MessageSchema | None = None
    meetup_status: str
    meetup_date: float | None = None

    @staticmethod
    def from_entity(conversation: Conversation, viewer_id: str) -> "ConversationSummarySchema":
        last = max(conversation.messages, key=lambda m: (m.sent_at, m.id)) if conversation.messages else None
        return ConversationSummarySchema(
            id=conversation.id,
            participants=sorted(conversation.participants),
            product_id=conversation.product_id,
            unread_count=conversation.unread_count(viewer_id),
            last_activity_at=conversation.last_activity_at,
            last_message=MessageSchema.from_entity(last, viewer_id) if last else None,
            meetup_status=conversation.transaction.meetup_status.value,
            meetup_date=conversation.transaction.meetup_date,
        )


class SendMessageRequestSchema(BaseModel):
    body: str = Field(min_length=1)


class SendMessageResponseSchema(BaseModel):
    message: MessageSchema
    notified: list[str] = Field(default_factory=list)
    auto_reply: MessageSchema | None = None


class MarkReadResponseSchema(BaseModel):
    updated: int


class ConversationStatsSchema(BaseModel):
    conversations: int
    unread_conversations: int
    unread_messages: int
    priority_conversations: int
    active_transactions: int
    last_activity_at: float | None = None

    @staticmethod
    def from_entity(stats: ConversationStats) -> "ConversationStatsSchema":
        return ConversationStatsSchema(
            conversations=stats.conversations,
            unread_conversations=stats.unread_conversations,
            unread_messages=stats.unread_messages,
            priority_conversations=stats.priority_conversations,
            active_transactions=stats.active_transactions,
            last_activity_at=stats.last_activity_at,
        )


class MeetupRequestSchema(BaseModel):
    meetup_date: float | None = None


class PresenceRequestSchema(BaseModel):
    state: PresenceState
    viewing_conversation_id: str | None = None


class PresenceResponseSchema(BaseModel):
    participant_id: str
    state: PresenceState
    viewing: list[str] = Field(default_factory=list)


class RemovedFeatureSchema(BaseModel):
    error: str
    message: str
