from abc import ABC, abstractmethod

from iskochat.domain.entities.message import Message


class NotificationPort(ABC):
    @abstractmethod
    def deliver(self, recipient_id: str, message: Message) -> None:
        raise NotImplementedError
