from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MeetupStatus(str, Enum):
    idle = "idle"
    proposed = "proposed"
    confirmed = "confirmed"
    window_to_confirm = "window_to_confirm"
    completed = "completed"
    unsuccessful = "unsuccessful"
    done_marked = "done_marked"


ACTIVE_STATUSES = frozenset({MeetupStatus.proposed, MeetupStatus.confirmed, MeetupStatus.window_to_confirm})


@dataclass(frozen=True)
class TransactionMeta:
    meetup_status: MeetupStatus = MeetupStatus.idle
    transaction_id: str | None = None
    meetup_date: float | None = None
    proposer_id: str | None = None
    buyer_confirmed_meetup: bool = False
    seller_confirmed_meetup: bool = False
    meetup_confirm_deadline: float | None = None
    transaction_confirm_deadline: float | None = None
    buyer_marked_completed: bool = False
    seller_marked_completed: bool = False
    buyer_appealed: bool = False
    seller_appealed: bool = False
    appeal_deadline: float | None = None
    # cleared by mark_done, restored by cancel_done
    rewards_enabled: bool = True
    rated_by: frozenset[str] = frozenset()

    @property
    def is_active(self) -> bool:
        return self.meetup_status in ACTIVE_STATUSES
