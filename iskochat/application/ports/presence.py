from abc import ABC, abstractmethod

from iskochat.domain.entities.presence_snapshot import PresenceSnapshot


class PresencePort(ABC):
    @abstractmethod
    def snapshot(self) -> PresenceSnapshot:
        raise NotImplementedError
