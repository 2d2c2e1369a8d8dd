from __future__ import annotations

import threading

from iskochat.application.ports.presence import PresencePort
from iskochat.domain.entities.participant import PresenceState
from iskochat.domain.entities.presence_snapshot import PresenceSnapshot


class MemoryPresenceTracker(PresencePort):
    def __init__(self) -> None:
        self._presence: dict[str, PresenceState] = {}
        self._views: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def set_presence(self, participant_id: str, state: PresenceState) -> None:
        with self._lock:
            self._presence[participant_id] = state
            if state is PresenceState.offline:
                self._views.pop(participant_id, None)

    def open_view(self, participant_id: str, conversation_id: str) -> None:
        with self._lock:
            self._views.setdefault(participant_id, set()).add(conversation_id)

    def close_view(self, participant_id: str, conversation_id: str | None = None) -> None:
        """Close one view, or every view of the participant when conversation_id is None."""
        with self._lock:
            if conversation_id is None:
                self._views.pop(participant_id, None)
                return
            views = self._views.get(participant_id)
            if views is not None:
                views.discard(conversation_id)

    def snapshot(self) -> PresenceSnapshot:
        with self._lock:
            return PresenceSnapshot(
                presence=dict(self._presence),
                active_views={pid: frozenset(views) for pid, views in self._views.items()},
            )
