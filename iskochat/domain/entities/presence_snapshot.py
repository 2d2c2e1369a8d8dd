from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from iskochat.domain.entities.participant import Participant, PresenceState


@dataclass(frozen=True)
class PresenceSnapshot:
    """Point-in-time copy of presence and open conversation views."""

    presence: Mapping[str, PresenceState] = field(default_factory=dict)
    active_views: Mapping[str, frozenset[str]] = field(default_factory=dict)

    def presence_of(self, participant_id: str) -> PresenceState:
        return self.presence.get(participant_id, PresenceState.offline)

    def is_viewing(self, participant_id: str, conversation_id: str) -> bool:
        return conversation_id in self.active_views.get(participant_id, frozenset())

    def participant(self, participant_id: str) -> Participant:
        return Participant(id=participant_id, presence=self.presence_of(participant_id))
