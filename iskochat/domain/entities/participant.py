from dataclasses import dataclass
from enum import Enum


class PresenceState(str, Enum):
    online = "online"
    away = "away"
    offline = "offline"


@dataclass(frozen=True)
class Participant:
    id: str
    presence: PresenceState = PresenceState.offline

    @staticmethod
    def from_payload(participant_id: str, presence: str | Enum | None) -> "Participant":
        if isinstance(presence, Enum):
            presence = presence.value
        state = str(presence or PresenceState.offline.value).strip().lower()
        return Participant(id=(participant_id or "").strip(), presence=PresenceState(state))
