from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from iskochat.application.exceptions import ConstraintViolation
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.message import Message
from iskochat.domain.entities.participant import Participant


@dataclass(frozen=True)
class RankingSignals:
    """Optional ranking signals placed between unread count and recency."""

    priority_participants: frozenset[str] = field(default_factory=frozenset)
    favor_active_transactions: bool = False


def _participant_id(participant: Participant | str) -> str:
    if isinstance(participant, Participant):
        return participant.id
    return participant


def _conversation_key(
    conversation: Conversation, participant_id: str, signals: RankingSignals | None
) -> tuple:
    # sorted ascending, so descending keys are negated
    last = conversation.last_activity_at
    key: list = [-conversation.unread_count(participant_id)]
    if signals is not None:
        has_priority = bool(conversation.others(participant_id) & signals.priority_participants)
        key.append(0 if has_priority else 1)
        active = signals.favor_active_transactions and conversation.transaction.is_active
        key.append(0 if active else 1)
    key.append(0 if last is not None else 1)
    key.append(-(last or 0.0))
    key.append(conversation.id)
    return tuple(key)


def rank_conversations(
    participant: Participant | str,
    conversations: Iterable[Conversation],
    *,
    signals: RankingSignals | None = None,
) -> list[Conversation]:
    """Order a participant's conversations for display.

    Keys: unread count for the participant (descending), last activity
    (descending, empty threads last), conversation id (ascending). With
    ``signals``, "has a priority participant" and "transaction is active"
    rank between unread count and last activity.

    Raises ConstraintViolation if any conversation does not include the
    participant. Inputs are never mutated.
    """
    participant_id = _participant_id(participant)
    candidates = list(conversations)
    for conversation in candidates:
        if not conversation.includes(participant_id):
            raise ConstraintViolation(
                f"Conversation {conversation.id} does not include participant {participant_id}"
            )
    return sorted(candidates, key=lambda c: _conversation_key(c, participant_id, signals))


def rank_messages(messages: Iterable[Message]) -> list[Message]:
    """Chronological order, ties broken by message id."""
    return sorted(messages, key=lambda m: (m.sent_at, m.id))


def filter_unread(participant: Participant | str, conversations: Iterable[Conversation]) -> list[Conversation]:
    participant_id = _participant_id(participant)
    return [c for c in conversations if c.unread_count(participant_id) > 0]


def filter_priority(
    participant: Participant | str,
    conversations: Iterable[Conversation],
    priority_participants: Iterable[str],
) -> list[Conversation]:
    participant_id = _participant_id(participant)
    priority = frozenset(priority_participants)
    return [c for c in conversations if c.others(participant_id) & priority]


def filter_active_transactions(conversations: Iterable[Conversation]) -> list[Conversation]:
    return [c for c in conversations if c.transaction.is_active]


def total_unread_count(participant: Participant | str, conversations: Iterable[Conversation]) -> int:
    participant_id = _participant_id(participant)
    return sum(c.unread_count(participant_id) for c in conversations)


def most_recent_activity(conversations: Sequence[Conversation]) -> float | None:
    times = [c.last_activity_at for c in conversations if c.last_activity_at is not None]
    return max(times) if times else None


def categorize_message(message: Message, participant: Participant | str) -> str:
    return "unread" if message.is_unread_for(_participant_id(participant)) else "read"
