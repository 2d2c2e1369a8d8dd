from __future__ import annotations

from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.message import Message
from iskochat.domain.entities.participant import Participant, PresenceState
from iskochat.domain.entities.presence_snapshot import PresenceSnapshot


def should_notify(message: Message, recipient: Participant, *, viewing: bool = False) -> bool:
    """Decide whether ``recipient`` gets an interruptive notification.

    ``viewing`` is the active-view flag: the recipient currently has the
    message's conversation open.
    """
    if recipient.id == message.sender_id:
        return False
    if recipient.presence is PresenceState.online and viewing:
        return False
    return True


def recipients_to_notify(conversation: Conversation, message: Message, snapshot: PresenceSnapshot) -> list[str]:
    return [
        participant_id
        for participant_id in sorted(conversation.participants)
        if should_notify(
            message,
            snapshot.participant(participant_id),
            viewing=snapshot.is_viewing(participant_id, conversation.id),
        )
    ]
