from __future__ import annotations

import time
from dataclasses import replace

from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.transaction import MeetupStatus, TransactionMeta


DAY_SECONDS = 24 * 60 * 60
PROPOSAL_CONFIRM_DAYS = 3
TRANSACTION_CONFIRM_DAYS = 7
APPEAL_DAYS = 7


def _now(now_ts: float | None) -> float:
    return time.time() if now_ts is None else now_ts


def _with_transaction(conversation: Conversation, transaction: TransactionMeta) -> Conversation:
    return conversation.with_changes(transaction=transaction)


def _idle(transaction: TransactionMeta) -> TransactionMeta:
    return replace(
        transaction,
        meetup_status=MeetupStatus.idle,
        meetup_date=None,
        proposer_id=None,
        buyer_confirmed_meetup=False,
        seller_confirmed_meetup=False,
        meetup_confirm_deadline=None,
    )


def transaction_confirm_deadline(meetup_date: float) -> float:
    return meetup_date + TRANSACTION_CONFIRM_DAYS * DAY_SECONDS


def propose_meetup(conversation: Conversation, proposer_id: str, meetup_date: float, now_ts: float | None = None) -> Conversation:
    txn = replace(
        conversation.transaction,
        meetup_status=MeetupStatus.proposed,
        meetup_date=meetup_date,
        proposer_id=proposer_id,
        buyer_confirmed_meetup=proposer_id == conversation.buyer_id,
        seller_confirmed_meetup=proposer_id == conversation.seller_id,
        meetup_confirm_deadline=_now(now_ts) + PROPOSAL_CONFIRM_DAYS * DAY_SECONDS,
    )
    return _with_transaction(conversation, txn)


def cancel_meetup(conversation: Conversation) -> Conversation:
    return _with_transaction(conversation, _idle(conversation.transaction))


def confirm_meetup(conversation: Conversation, confirmer_id: str) -> Conversation:
    txn = conversation.transaction
    if confirmer_id == conversation.buyer_id:
        txn = replace(txn, buyer_confirmed_meetup=True)
    if confirmer_id == conversation.seller_id:
        txn = replace(txn, seller_confirmed_meetup=True)
    if txn.buyer_confirmed_meetup and txn.seller_confirmed_meetup:
        txn = replace(txn, meetup_status=MeetupStatus.confirmed)
        if txn.meetup_date is not None:
            txn = replace(txn, transaction_confirm_deadline=transaction_confirm_deadline(txn.meetup_date))
    return _with_transaction(conversation, txn)


def expire_proposal(conversation: Conversation, now_ts: float | None = None) -> Conversation:
    txn = conversation.transaction
    if txn.meetup_status is MeetupStatus.proposed and txn.meetup_confirm_deadline is not None:
        if txn.meetup_confirm_deadline < _now(now_ts):
            return _with_transaction(conversation, _idle(txn))
    return conversation


def enter_window_to_confirm(conversation: Conversation, now_ts: float | None = None) -> Conversation:
    txn = conversation.transaction
    if (
        txn.meetup_status is MeetupStatus.confirmed
        and txn.meetup_date is not None
        and txn.transaction_confirm_deadline is not None
        and _now(now_ts) >= txn.meetup_date
    ):
        return _with_transaction(conversation, replace(txn, meetup_status=MeetupStatus.window_to_confirm))
    return conversation


def mark_completed(conversation: Conversation, participant_id: str) -> Conversation:
    txn = conversation.transaction
    if participant_id == conversation.buyer_id:
        txn = replace(txn, buyer_marked_completed=True)
    if participant_id == conversation.seller_id:
        txn = replace(txn, seller_marked_completed=True)
    if txn.buyer_marked_completed and txn.seller_marked_completed:
        txn = replace(txn, meetup_status=MeetupStatus.completed)
    return _with_transaction(conversation, txn)


def mark_unsuccessful(conversation: Conversation, now_ts: float | None = None) -> Conversation:
    txn = replace(
        conversation.transaction,
        meetup_status=MeetupStatus.unsuccessful,
        appeal_deadline=_now(now_ts) + APPEAL_DAYS * DAY_SECONDS,
    )
    return _with_transaction(conversation, txn)


def start_appeal(conversation: Conversation, participant_id: str) -> Conversation:
    txn = conversation.transaction
    if participant_id == conversation.buyer_id:
        txn = replace(txn, buyer_appealed=True)
    if participant_id == conversation.seller_id:
        txn = replace(txn, seller_appealed=True)
    return _with_transaction(conversation, txn)


def approve_appeal(conversation: Conversation, now_ts: float | None = None) -> Conversation:
    txn = replace(
        conversation.transaction,
        meetup_status=MeetupStatus.window_to_confirm,
        buyer_marked_completed=False,
        seller_marked_completed=False,
        transaction_confirm_deadline=_now(now_ts) + TRANSACTION_CONFIRM_DAYS * DAY_SECONDS,
        buyer_appealed=False,
        seller_appealed=False,
        appeal_deadline=None,
    )
    return _with_transaction(conversation, txn)


def dismiss_appeal(conversation: Conversation) -> Conversation:
    # the transaction stays unsuccessful
    return conversation


def mark_done(conversation: Conversation) -> Conversation:
    txn = replace(conversation.transaction, meetup_status=MeetupStatus.done_marked, rewards_enabled=False)
    return _with_transaction(conversation, txn)


def cancel_done(conversation: Conversation) -> Conversation:
    txn = replace(conversation.transaction, rewards_enabled=True)
    if txn.meetup_status is MeetupStatus.done_marked:
        txn = replace(txn, meetup_status=MeetupStatus.idle)
    return _with_transaction(conversation, txn)


def can_rate(transaction: TransactionMeta, already_rated: bool) -> bool:
    return transaction.meetup_status is MeetupStatus.completed and not already_rated


def record_rating(conversation: Conversation, participant_id: str) -> Conversation:
    txn = conversation.transaction
    return _with_transaction(conversation, replace(txn, rated_by=txn.rated_by | {participant_id}))
