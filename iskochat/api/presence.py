from fastapi import APIRouter, Depends

from iskochat.api.identity import get_current_participant_id
from iskochat.api.schemas import PresenceRequestSchema, PresenceResponseSchema
from iskochat.domain.entities.participant import PresenceState
from iskochat.infrastructure.presence.memory_presence import MemoryPresenceTracker
from iskochat.wiring.dependencies import get_presence_tracker

router = APIRouter()


@router.put("/presence", response_model=PresenceResponseSchema)
def update_presence(
    req: PresenceRequestSchema,
    participant_id: str = Depends(get_current_participant_id),
    tracker: MemoryPresenceTracker = Depends(get_presence_tracker),
):
    tracker.set_presence(participant_id, req.state)
    # one open conversation per client
    tracker.close_view(participant_id)
    if req.viewing_conversation_id and req.state is not PresenceState.offline:
        tracker.open_view(participant_id, req.viewing_conversation_id)

    snapshot = tracker.snapshot()
    return PresenceResponseSchema(
        participant_id=participant_id,
        state=snapshot.presence_of(participant_id),
        viewing=sorted(snapshot.active_views.get(participant_id, frozenset())),
    )
