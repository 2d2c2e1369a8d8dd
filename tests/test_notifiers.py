"""
Tests for the push notification adapters.
"""

from __future__ import annotations

import json

import httpx
import pytest

from iskochat.application.exceptions import NotificationDeliveryError
from iskochat.domain.entities.message import Message
from iskochat.infrastructure.notifications.http_push import PREVIEW_LENGTH, HttpPushNotifier
from iskochat.infrastructure.notifications.mock_notifier import MockNotifier


MESSAGE = Message(id="m1", conversation_id="c1", sender_id="alice", sent_at=1.0, body="x" * 500)


def test_http_push_posts_payload():
    """The push payload carries the preview and routing data with bearer auth."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    notifier = HttpPushNotifier("https://push.example/send", api_key="secret", client=client)

    notifier.deliver("bob", MESSAGE)

    assert seen["auth"] == "Bearer secret"
    assert seen["body"]["recipient_id"] == "bob"
    assert len(seen["body"]["body"]) == PREVIEW_LENGTH
    assert seen["body"]["data"] == {"conversation_id": "c1", "message_id": "m1", "sender_id": "alice"}


def test_http_push_raises_on_error_status():
    """A 4xx/5xx answer becomes NotificationDeliveryError."""
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503, json={"error": "down"})))
    notifier = HttpPushNotifier("https://push.example/send", client=client)

    with pytest.raises(NotificationDeliveryError) as exc:
        notifier.deliver("bob", MESSAGE)
    assert "503" in str(exc.value)


def test_http_push_raises_on_transport_error():
    """Network failures become NotificationDeliveryError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    notifier = HttpPushNotifier("https://push.example/send", client=httpx.Client(transport=httpx.MockTransport(handler)))

    with pytest.raises(NotificationDeliveryError):
        notifier.deliver("bob", MESSAGE)


def test_mock_notifier_records_deliveries():
    """The mock adapter records what it would have pushed."""
    notifier = MockNotifier()
    notifier.deliver("bob", MESSAGE)
    assert notifier.delivered == [("bob", "m1")]
