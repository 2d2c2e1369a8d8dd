from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any

from iskochat.application.exceptions import ConversationNotFoundError
from iskochat.application.ports.conversation_store import ConversationStorePort
from iskochat.domain.entities.conversation import Conversation
from iskochat.domain.entities.message import Message
from iskochat.domain.entities.transaction import MeetupStatus, TransactionMeta


_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")
FORMAT_VERSION = 1


def _is_safe_id(conversation_id: str) -> bool:
    return bool(_SAFE_ID.match(conversation_id)) and conversation_id not in {".", ".."}


class JsonConversationStore(ConversationStorePort):
    def __init__(self, data_dir: str = "./data/conversations") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, conversation_id: str) -> threading.Lock:
        """Get or create a lock for a conversation_id."""
        with self._lock_lock:
            if conversation_id not in self._locks:
                self._locks[conversation_id] = threading.Lock()
            return self._locks[conversation_id]

    def _get_file_path(self, conversation_id: str) -> Path:
        if not _is_safe_id(conversation_id):
            raise ValueError(f"Conversation id {conversation_id!r} cannot be used as a file name")
        return self._data_dir / f"{conversation_id}.json"

    def _lookup_file_path(self, conversation_id: str) -> Path:
        """File path for a read; an id that cannot name a file cannot have been stored."""
        if not _is_safe_id(conversation_id):
            raise ConversationNotFoundError(conversation_id)
        return self._data_dir / f"{conversation_id}.json"

    def _load(self, file_path: Path) -> Conversation | None:
        """Load a conversation file, None if missing or unreadable."""
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return self._deserialize_conversation(json.load(f))
        except (json.JSONDecodeError, IOError, KeyError, TypeError, ValueError) as e:
            self._logger.warning(
                "Skipping unreadable conversation file",
                extra={"reason": str(e), "conversation_id": file_path.stem},
            )
            return None

    def _save(self, conversation: Conversation) -> None:
        """Save conversation data to JSON file atomically."""
        file_path = self._get_file_path(conversation.id)
        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(self._serialize_conversation(conversation), f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def get_conversation(self, conversation_id: str) -> Conversation:
        with self._get_lock(conversation_id):
            conversation = self._load(self._lookup_file_path(conversation_id))
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    def list_for_participant(self, participant_id: str) -> list[Conversation]:
        result: list[Conversation] = []
        for file_path in sorted(self._data_dir.glob("*.json")):
            with self._get_lock(file_path.stem):
                conversation = self._load(file_path)
            if conversation is not None and conversation.includes(participant_id):
                result.append(conversation)
        return result

    def save_conversation(self, conversation: Conversation) -> None:
        with self._get_lock(conversation.id):
            self._save(conversation)

    def append_message(self, message: Message) -> Conversation:
        with self._get_lock(message.conversation_id):
            current = self._load(self._lookup_file_path(message.conversation_id))
            if current is None:
                raise ConversationNotFoundError(message.conversation_id)
            updated = current.appended(message)
            self._save(updated)
            return updated

    def mark_read(self, conversation_id: str, participant_id: str) -> int:
        with self._get_lock(conversation_id):
            current = self._load(self._lookup_file_path(conversation_id))
            if current is None:
                raise ConversationNotFoundError(conversation_id)
            messages = []
            changed = 0
            for message in current.messages:
                if message.is_unread_for(participant_id):
                    message = message.marked_read(participant_id)
                    changed += 1
                messages.append(message)
            if changed:
                self._save(current.with_changes(messages=tuple(messages)))
            return changed

    def _serialize_conversation(self, conversation: Conversation) -> dict[str, Any]:
        return {
            "id": conversation.id,
            "participants": sorted(conversation.participants),
            "product_id": conversation.product_id,
            "buyer_id": conversation.buyer_id,
            "seller_id": conversation.seller_id,
            "transaction": self._serialize_transaction(conversation.transaction),
            "messages": [self._serialize_message(m) for m in conversation.messages],
            "version": FORMAT_VERSION,
        }

    def _deserialize_conversation(self, data: dict[str, Any]) -> Conversation:
        return Conversation.create(
            conversation_id=data["id"],
            participants=data.get("participants", []),
            messages=[self._deserialize_message(m) for m in data.get("messages", [])],
            product_id=data.get("product_id"),
            buyer_id=data.get("buyer_id"),
            seller_id=data.get("seller_id"),
            transaction=self._deserialize_transaction(data.get("transaction", {})),
        )

    def _serialize_message(self, message: Message) -> dict[str, Any]:
        return {
            "id": message.id,
            "conversation_id": message.conversation_id,
            "sender_id": message.sender_id,
            "sent_at": message.sent_at,
            "body": message.body,
            "read_by": dict(message.read_by),
            "kind": message.kind,
            "is_automated": message.is_automated,
        }

    def _deserialize_message(self, data: dict[str, Any]) -> Message:
        return Message(
            id=str(data["id"]),
            conversation_id=str(data["conversation_id"]),
            sender_id=str(data["sender_id"]),
            sent_at=float(data["sent_at"]),
            body=data.get("body", ""),
            read_by={str(k): bool(v) for k, v in (data.get("read_by") or {}).items()},
            kind=data.get("kind", "text"),
            is_automated=bool(data.get("is_automated", False)),
        )

    def _serialize_transaction(self, txn: TransactionMeta) -> dict[str, Any]:
        return {
            "meetup_status": txn.meetup_status.value,
            "transaction_id": txn.transaction_id,
            "meetup_date": txn.meetup_date,
            "proposer_id": txn.proposer_id,
            "buyer_confirmed_meetup": txn.buyer_confirmed_meetup,
            "seller_confirmed_meetup": txn.seller_confirmed_meetup,
            "meetup_confirm_deadline": txn.meetup_confirm_deadline,
            "transaction_confirm_deadline": txn.transaction_confirm_deadline,
            "buyer_marked_completed": txn.buyer_marked_completed,
            "seller_marked_completed": txn.seller_marked_completed,
            "buyer_appealed": txn.buyer_appealed,
            "seller_appealed": txn.seller_appealed,
            "appeal_deadline": txn.appeal_deadline,
            "rewards_enabled": txn.rewards_enabled,
            "rated_by": sorted(txn.rated_by),
        }

    def _deserialize_transaction(self, data: dict[str, Any]) -> TransactionMeta:
        return TransactionMeta(
            meetup_status=MeetupStatus(data.get("meetup_status", MeetupStatus.idle.value)),
            transaction_id=data.get("transaction_id"),
            meetup_date=data.get("meetup_date"),
            proposer_id=data.get("proposer_id"),
            buyer_confirmed_meetup=data.get("buyer_confirmed_meetup", False),
            seller_confirmed_meetup=data.get("seller_confirmed_meetup", False),
            meetup_confirm_deadline=data.get("meetup_confirm_deadline"),
            transaction_confirm_deadline=data.get("transaction_confirm_deadline"),
            buyer_marked_completed=data.get("buyer_marked_completed", False),
            seller_marked_completed=data.get("seller_marked_completed", False),
            buyer_appealed=data.get("buyer_appealed", False),
            seller_appealed=data.get("seller_appealed", False),
            appeal_deadline=data.get("appeal_deadline"),
            rewards_enabled=data.get("rewards_enabled", True),
            rated_by=frozenset(data.get("rated_by", [])),
        )
