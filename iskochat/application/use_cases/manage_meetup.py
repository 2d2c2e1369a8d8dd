from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Iterable

from iskochat.application.exceptions import ConstraintViolation, MeetupTransitionError
from iskochat.application.ports.conversation_store import ConversationStorePort
from iskochat.application.use_cases import meetup
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.transaction import MeetupStatus


class MeetupAction(str, Enum):
    propose = "propose"
    cancel = "cancel"
    confirm = "confirm"
    complete = "complete"
    unsuccessful = "unsuccessful"
    appeal = "appeal"
    approve_appeal = "approve_appeal"
    dismiss_appeal = "dismiss_appeal"
    done = "done"
    cancel_done = "cancel_done"
    rate = "rate"


# statuses each action may start from; actions missing here apply in any status
ALLOWED_FROM: dict[MeetupAction, frozenset[MeetupStatus]] = {
    MeetupAction.propose: frozenset({MeetupStatus.idle, MeetupStatus.proposed}),
    MeetupAction.cancel: frozenset({MeetupStatus.proposed, MeetupStatus.confirmed}),
    MeetupAction.confirm: frozenset({MeetupStatus.proposed}),
    MeetupAction.complete: frozenset({MeetupStatus.window_to_confirm}),
    MeetupAction.unsuccessful: frozenset({MeetupStatus.window_to_confirm}),
    MeetupAction.appeal: frozenset({MeetupStatus.unsuccessful}),
    MeetupAction.approve_appeal: frozenset({MeetupStatus.unsuccessful}),
    MeetupAction.dismiss_appeal: frozenset({MeetupStatus.unsuccessful}),
    MeetupAction.cancel_done: frozenset({MeetupStatus.done_marked}),
    MeetupAction.rate: frozenset({MeetupStatus.completed}),
}

ADMIN_ACTIONS = frozenset({MeetupAction.approve_appeal, MeetupAction.dismiss_appeal})
# actions that only the buyer or the seller of the listing may take
PARTY_ACTIONS = frozenset(
    {MeetupAction.propose, MeetupAction.confirm, MeetupAction.complete, MeetupAction.appeal, MeetupAction.rate}
)


class MeetupUseCase:
    """Applies one meetup action to a conversation's transaction and stores the result.

    Deadline-driven moves (proposal expiry, entering the confirmation window)
    are applied first, so every action sees the transaction as of ``now_ts``.
    """

    def __init__(self, store: ConversationStorePort, admin_participants: Iterable[str] = ()) -> None:
        self._store = store
        self._admins = frozenset(admin_participants)
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        participant_id: str,
        conversation_id: str,
        action: MeetupAction,
        meetup_date: float | None = None,
        now_ts: float | None = None,
    ) -> Conversation:
        now = time.time() if now_ts is None else now_ts
        conversation = self._store.get_conversation(conversation_id)
        is_admin = participant_id in self._admins
        if not conversation.includes(participant_id) and not (is_admin and action in ADMIN_ACTIONS):
            raise ConstraintViolation(f"Conversation {conversation_id} does not include participant {participant_id}")
        if action in ADMIN_ACTIONS and not is_admin:
            raise ConstraintViolation(f"Participant {participant_id} cannot {action.value} appeals")
        if action in PARTY_ACTIONS and participant_id not in (conversation.buyer_id, conversation.seller_id):
            raise ConstraintViolation(f"Participant {participant_id} is neither buyer nor seller in {conversation_id}")

        conversation = meetup.enter_window_to_confirm(meetup.expire_proposal(conversation, now), now)
        status = conversation.transaction.meetup_status
        allowed = ALLOWED_FROM.get(action)
        if allowed is not None and status not in allowed:
            raise MeetupTransitionError(f"Cannot {action.value} while the meetup is {status.value}")

        updated = self._apply(conversation, participant_id, action, meetup_date, now)
        self._store.save_conversation(updated)
        self._logger.info(
            "Meetup updated",
            extra={
                "conversation_id": conversation_id,
                "participant_id": participant_id,
                "reason": f"{action.value}:{updated.transaction.meetup_status.value}",
            },
        )
        return updated

    def _apply(
        self,
        conversation: Conversation,
        participant_id: str,
        action: MeetupAction,
        meetup_date: float | None,
        now: float,
    ) -> Conversation:
        if action is MeetupAction.propose:
            if meetup_date is None:
                raise MeetupTransitionError("A meetup proposal needs a meetup_date")
            return meetup.propose_meetup(conversation, participant_id, meetup_date, now_ts=now)
        if action is MeetupAction.cancel:
            return meetup.cancel_meetup(conversation)
        if action is MeetupAction.confirm:
            return meetup.confirm_meetup(conversation, participant_id)
        if action is MeetupAction.complete:
            return meetup.mark_completed(conversation, participant_id)
        if action is MeetupAction.unsuccessful:
            return meetup.mark_unsuccessful(conversation, now_ts=now)
        if action is MeetupAction.appeal:
            return meetup.start_appeal(conversation, participant_id)
        if action is MeetupAction.approve_appeal:
            return meetup.approve_appeal(conversation, now_ts=now)
        if action is MeetupAction.dismiss_appeal:
            return meetup.dismiss_appeal(conversation)
        if action is MeetupAction.done:
            return meetup.mark_done(conversation)
        if action is MeetupAction.cancel_done:
            return meetup.cancel_done(conversation)
        if not meetup.can_rate(conversation.transaction, participant_id in conversation.transaction.rated_by):
            raise MeetupTransitionError(f"Participant {participant_id} already rated this transaction")
        return meetup.record_rating(conversation, participant_id)
