from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from iskochat.domain.exceptions import ConstraintViolation
from iskochat.domain.entities.message import Message
from iskochat.domain.entities.transaction import TransactionMeta


@dataclass(frozen=True)
class Conversation:
    id: str
    participants: frozenset[str]
    messages: tuple[Message, ...] = ()
    product_id: str | None = None
    buyer_id: str | None = None
    seller_id: str | None = None
    transaction: TransactionMeta = field(default_factory=TransactionMeta)

    def __post_init__(self) -> None:
        if len(self.participants) < 2:
            raise ConstraintViolation(f"Conversation {self.id} needs at least two participants")
        for role_id in (self.buyer_id, self.seller_id):
            if role_id is not None and role_id not in self.participants:
                raise ConstraintViolation(f"Conversation {self.id} does not include {role_id}")
        for message in self.messages:
            if message.conversation_id != self.id:
                raise ConstraintViolation(
                    f"Message {message.id} belongs to {message.conversation_id}, not {self.id}"
                )

    @staticmethod
    def create(
        conversation_id: str,
        participants: Iterable[str],
        messages: Iterable[Message] = (),
        product_id: str | None = None,
        buyer_id: str | None = None,
        seller_id: str | None = None,
        transaction: TransactionMeta | None = None,
    ) -> "Conversation":
        return Conversation(
            id=conversation_id,
            participants=frozenset(p.strip() for p in participants if p and p.strip()),
            messages=tuple(messages),
            product_id=product_id,
            buyer_id=buyer_id,
            seller_id=seller_id,
            transaction=transaction or TransactionMeta(),
        )

    @property
    def last_activity_at(self) -> float | None:
        if not self.messages:
            return None
        return max(m.sent_at for m in self.messages)

    def includes(self, participant_id: str) -> bool:
        return participant_id in self.participants

    def unread_count(self, participant_id: str) -> int:
        return sum(1 for m in self.messages if m.is_unread_for(participant_id))

    def others(self, participant_id: str) -> frozenset[str]:
        return self.participants - {participant_id}

    def appended(self, message: Message) -> "Conversation":
        """Return a copy with ``message`` added at the end of the thread.

        The thread is append-only by send time, so a message older than the
        current last activity is rejected, as is a sender outside the thread.
        """
        if message.conversation_id != self.id:
            raise ConstraintViolation(f"Message {message.id} belongs to {message.conversation_id}, not {self.id}")
        if message.sender_id not in self.participants:
            raise ConstraintViolation(f"Sender {message.sender_id} is not a participant of {self.id}")
        if any(m.id == message.id for m in self.messages):
            raise ConstraintViolation(f"Message id {message.id} already used in {self.id}")
        last = self.last_activity_at
        if last is not None and message.sent_at < last:
            raise ConstraintViolation(f"Message {message.id} is older than the last activity of {self.id}")
        return self.with_changes(messages=self.messages + (message,))

    def with_changes(self, **changes) -> "Conversation":
        values = {
            "id": self.id,
            "participants": self.participants,
            "messages": self.messages,
            "product_id": self.product_id,
            "buyer_id": self.buyer_id,
            "seller_id": self.seller_id,
            "transaction": self.transaction,
        }
        values.update(changes)
        return Conversation(**values)
