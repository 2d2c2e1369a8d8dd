"""
Tests for conversation store adapters.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from iskochat.application.exceptions import ConstraintViolation, ConversationNotFoundError
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.message import Message
from iskochat.domain.entities.transaction import MeetupStatus, TransactionMeta
from iskochat.infrastructure.store.json_store import JsonConversationStore
from iskochat.infrastructure.store.memory_store import MemoryConversationStore


def _msg(mid: str, sender: str, sent_at: float, conversation_id: str = "c1") -> Message:
    return Message(id=mid, conversation_id=conversation_id, sender_id=sender, sent_at=sent_at, body=f"text {mid}")


def _stores(tmpdir: str):
    return [MemoryConversationStore(), JsonConversationStore(data_dir=tmpdir)]


def test_json_store_persistence():
    """JSON store round-trips a conversation with messages and transaction state."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        conversation = Conversation.create(
            "c1",
            ["buyer", "seller"],
            [Message(id="m1", conversation_id="c1", sender_id="buyer", sent_at=5.0, body="Is this available?", read_by={"buyer": True})],
            product_id="p1",
            buyer_id="buyer",
            seller_id="seller",
            transaction=TransactionMeta(
                meetup_status=MeetupStatus.proposed, meetup_date=100.0, proposer_id="buyer", rated_by=frozenset({"seller"})
            ),
        )
        store.save_conversation(conversation)

        # a fresh instance reads from disk
        retrieved = JsonConversationStore(data_dir=tmpdir).get_conversation("c1")

        assert retrieved == conversation
        assert retrieved.transaction.meetup_status is MeetupStatus.proposed
        assert retrieved.transaction.rated_by == frozenset({"seller"})
        assert retrieved.unread_count("seller") == 1


def test_append_and_mark_read():
    """Both stores append atomically and report how many messages were marked read."""
    with tempfile.TemporaryDirectory() as tmpdir:
        for store in _stores(tmpdir):
            store.save_conversation(Conversation.create("c1", ["a", "b"]))
            store.append_message(_msg("m1", "a", 1.0))
            updated = store.append_message(_msg("m2", "a", 2.0))

            assert [m.id for m in updated.messages] == ["m1", "m2"]
            assert store.get_conversation("c1").unread_count("b") == 2
            assert store.mark_read("c1", "b") == 2
            assert store.mark_read("c1", "b") == 0
            assert store.get_conversation("c1").unread_count("b") == 0


def test_append_rejects_out_of_order_message():
    """Store appends keep the thread ordered by send time."""
    with tempfile.TemporaryDirectory() as tmpdir:
        for store in _stores(tmpdir):
            store.save_conversation(Conversation.create("c1", ["a", "b"], [_msg("m1", "a", 10.0)]))
            with pytest.raises(ConstraintViolation):
                store.append_message(_msg("m2", "b", 5.0))
            assert len(store.get_conversation("c1").messages) == 1


def test_missing_conversation():
    """Unknown ids raise ConversationNotFoundError."""
    with tempfile.TemporaryDirectory() as tmpdir:
        for store in _stores(tmpdir):
            with pytest.raises(ConversationNotFoundError):
                store.get_conversation("nope")
            with pytest.raises(ConversationNotFoundError):
                store.append_message(_msg("m1", "a", 1.0, conversation_id="nope"))
            with pytest.raises(ConversationNotFoundError):
                store.mark_read("nope", "a")


def test_list_for_participant():
    """Only conversations that include the participant are listed."""
    with tempfile.TemporaryDirectory() as tmpdir:
        for store in _stores(tmpdir):
            store.save_conversation(Conversation.create("c1", ["a", "b"]))
            store.save_conversation(Conversation.create("c2", ["a", "c"]))
            store.save_conversation(Conversation.create("c3", ["b", "c"]))

            assert sorted(c.id for c in store.list_for_participant("a")) == ["c1", "c2"]
            assert store.list_for_participant("z") == []


def test_json_store_skips_corrupted_files():
    """A corrupted file is skipped in listings and reads as missing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        store.save_conversation(Conversation.create("c1", ["a", "b"]))
        (Path(tmpdir) / "broken.json").write_text("{not json", encoding="utf-8")

        assert [c.id for c in store.list_for_participant("a")] == ["c1"]
        with pytest.raises(ConversationNotFoundError):
            store.get_conversation("broken")


def test_json_store_rejects_unsafe_ids():
    """Conversation ids cannot escape the data directory; lookups treat them as unknown."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        for bad_id in ("../etc/passwd", "a b", ".."):
            with pytest.raises(ConversationNotFoundError):
                store.get_conversation(bad_id)
            with pytest.raises(ConversationNotFoundError):
                store.mark_read(bad_id, "a")
        with pytest.raises(ConversationNotFoundError):
            store.append_message(_msg("m1", "a", 1.0, conversation_id="a b"))
        with pytest.raises(ValueError):
            store.save_conversation(Conversation.create("a b", ["a", "b"]))
        assert list(Path(tmpdir).iterdir()) == []
