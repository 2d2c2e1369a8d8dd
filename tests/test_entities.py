"""
Tests for domain entity invariants and feature flags.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from iskochat.application import exceptions as app_exceptions
from iskochat.application.exceptions import ConstraintViolation, FeatureDisabledError
from iskochat.domain import exceptions as domain_exceptions
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.feature import Feature, FeatureFlags, FeatureState
from iskochat.domain.entities.message import Message
from iskochat.domain.entities.participant import Participant, PresenceState


def _msg(mid: str, sender: str, sent_at: float, conversation_id: str = "c1") -> Message:
    return Message(id=mid, conversation_id=conversation_id, sender_id=sender, sent_at=sent_at, body="x")


def test_conversation_requires_two_participants():
    """A thread needs at least two members."""
    with pytest.raises(ConstraintViolation):
        Conversation.create("c1", ["solo"])
    with pytest.raises(ConstraintViolation):
        Conversation.create("c1", ["solo", " solo ", ""])


def test_conversation_rejects_foreign_messages():
    """Messages must belong to the conversation they are stored in."""
    with pytest.raises(ConstraintViolation):
        Conversation.create("c1", ["a", "b"], [_msg("m1", "a", 1.0, conversation_id="c2")])


def test_roles_must_be_participants():
    """Buyer and seller come from the participant set."""
    with pytest.raises(ConstraintViolation):
        Conversation.create("c1", ["a", "b"], buyer_id="z")


def test_last_activity_is_monotonic_under_append():
    """Appending never moves last activity backwards, and older messages are rejected."""
    convo = Conversation.create("c1", ["a", "b"])
    assert convo.last_activity_at is None

    seen = []
    for i, ts in enumerate([1.0, 1.0, 5.0, 9.0]):
        convo = convo.appended(_msg(f"m{i}", "a" if i % 2 else "b", ts))
        seen.append(convo.last_activity_at)
    assert seen == sorted(seen)
    assert convo.last_activity_at == 9.0

    with pytest.raises(ConstraintViolation):
        convo.appended(_msg("late", "a", 2.0))


def test_append_rejects_outsiders_and_reused_ids():
    """Senders must be members; message ids are never reused."""
    convo = Conversation.create("c1", ["a", "b"]).appended(_msg("m1", "a", 1.0))
    with pytest.raises(ConstraintViolation):
        convo.appended(_msg("m2", "mallory", 2.0))
    with pytest.raises(ConstraintViolation):
        convo.appended(_msg("m1", "b", 3.0))


def test_unread_count_ignores_own_and_read_messages():
    """Only other people's unread messages count."""
    convo = Conversation.create(
        "c1",
        ["a", "b"],
        [
            _msg("m1", "a", 1.0),
            _msg("m2", "b", 2.0),
            Message(id="m3", conversation_id="c1", sender_id="b", sent_at=3.0, body="x", read_by={"a": True}),
        ],
    )
    assert convo.unread_count("a") == 1
    assert convo.unread_count("b") == 1


def test_marked_read_returns_new_message():
    """Read state changes produce a new value."""
    message = _msg("m1", "a", 1.0)
    read = message.marked_read("b")
    assert read.is_read_by("b") is True
    assert message.is_read_by("b") is False


def test_participant_from_payload():
    """Presence strings normalize to the enum, defaulting to offline."""
    assert Participant.from_payload(" u1 ", "ONLINE") == Participant("u1", PresenceState.online)
    assert Participant.from_payload("u1", None).presence is PresenceState.offline
    assert Participant.from_payload("u1", PresenceState.away).presence is PresenceState.away


def test_removed_features_stay_disabled():
    """Configuration cannot switch a removed flow back on."""
    flags = FeatureFlags(states={Feature.custom_otp: FeatureState.enabled, Feature.auto_reply: FeatureState.enabled})

    assert flags.state_of(Feature.custom_otp) is FeatureState.disabled
    assert flags.is_enabled(Feature.auto_reply) is True
    assert flags.is_enabled(Feature.priority_ranking) is False

    with pytest.raises(FeatureDisabledError) as exc:
        flags.require(Feature.custom_otp)
    assert exc.value.code == "CUSTOM_OTP_REMOVED"
    flags.require(Feature.auto_reply)


def test_flags_from_switches():
    """Boolean switches map to feature states."""
    flags = FeatureFlags.from_switches(auto_reply=True, priority_ranking=False)
    assert flags.is_enabled(Feature.auto_reply)
    assert flags.state_of(Feature.priority_ranking) is FeatureState.disabled


def test_domain_errors_are_shared_with_application_layer():
    """The application layer re-exports the domain errors rather than redefining them."""
    assert app_exceptions.ConstraintViolation is domain_exceptions.ConstraintViolation
    assert app_exceptions.FeatureDisabledError is domain_exceptions.FeatureDisabledError
    with pytest.raises(app_exceptions.ConstraintViolation):
        Conversation.create("c1", ["solo"])


def test_domain_does_not_import_application_layer():
    """Entities depend only on the domain package."""
    domain_dir = Path(domain_exceptions.__file__).parent
    offenders = [
        path.name
        for path in domain_dir.rglob("*.py")
        if "iskochat.application" in path.read_text(encoding="utf-8")
    ]
    assert offenders == []
