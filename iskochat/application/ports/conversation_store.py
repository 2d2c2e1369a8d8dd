from abc import ABC, abstractmethod

from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.message import Message


class ConversationStorePort(ABC):
    @abstractmethod
    def get_conversation(self, conversation_id: str) -> Conversation:
        """Raises ConversationNotFoundError when the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    def list_for_participant(self, participant_id: str) -> list[Conversation]:
        raise NotImplementedError

    @abstractmethod
    def save_conversation(self, conversation: Conversation) -> None:
        raise NotImplementedError

    @abstractmethod
    def append_message(self, message: Message) -> Conversation:
        """
        Append a message to its conversation and return the updated conversation.
        The read/modify/write is atomic per conversation.
        """
        raise NotImplementedError

    @abstractmethod
    def mark_read(self, conversation_id: str, participant_id: str) -> int:
        """
        Mark every message in the conversation read for the participant.
        Returns the number of messages that changed.
        """
        raise NotImplementedError
