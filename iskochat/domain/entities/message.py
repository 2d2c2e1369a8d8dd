from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class Message:
    id: str
    conversation_id: str
    sender_id: str
    sent_at: float
    body: str
    read_by: Mapping[str, bool] = field(default_factory=dict)
    kind: str = "text"  # "text" | "product" | "system"
    is_automated: bool = False

    def is_read_by(self, participant_id: str) -> bool:
        return bool(self.read_by.get(participant_id, False))

    def is_unread_for(self, participant_id: str) -> bool:
        return participant_id != self.sender_id and not self.is_read_by(participant_id)

    def marked_read(self, participant_id: str) -> "Message":
        read_by = dict(self.read_by)
        read_by[participant_id] = True
        return Message(
            id=self.id,
            conversation_id=self.conversation_id,
            sender_id=self.sender_id,
            sent_at=self.sent_at,
            body=self.body,
            read_by=read_by,
            kind=self.kind,
            is_automated=self.is_automated,
        )
