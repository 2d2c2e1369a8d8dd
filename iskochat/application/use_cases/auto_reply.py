from __future__ import annotations

from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.message import Message


DEFAULT_AUTO_REPLY = "Hello! Thanks for your message. I'll get back to you as soon as possible."


def should_trigger_auto_reply(conversation: Conversation) -> bool:
    """First message of the thread came from the buyer and the seller has not answered."""
    if conversation.buyer_id is None or conversation.seller_id is None:
        return False
    if len(conversation.messages) != 1:
        return False
    first = conversation.messages[0]
    seller_responded = any(m.sender_id == conversation.seller_id for m in conversation.messages)
    return first.sender_id == conversation.buyer_id and not seller_responded


def build_auto_reply(conversation: Conversation, text: str, now_ts: float, message_id: str) -> Message:
    if conversation.seller_id is None:
        raise ValueError(f"Conversation {conversation.id} has no seller to reply as")
    last = conversation.last_activity_at
    return Message(
        id=message_id,
        conversation_id=conversation.id,
        sender_id=conversation.seller_id,
        # never older than the message it answers
        sent_at=max(now_ts, last) if last is not None else now_ts,
        body=(text or DEFAULT_AUTO_REPLY).strip(),
        read_by={conversation.seller_id: True},
        is_automated=True,
    )
