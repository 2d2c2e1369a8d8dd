from __future__ import annotations

import logging

import httpx

from iskochat.application.exceptions import NotificationDeliveryError
from iskochat.application.ports.notifier import NotificationPort
from iskochat.domain.entities.message import Message


PREVIEW_LENGTH = 200


class HttpPushNotifier(NotificationPort):
    def __init__(
        self,
        endpoint: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def deliver(self, recipient_id: str, message: Message) -> None:
        payload = {
            "recipient_id": recipient_id,
            "title": "New message",
            "body": message.body[:PREVIEW_LENGTH],
            "data": {
                "conversation_id": message.conversation_id,
                "message_id": message.id,
                "sender_id": message.sender_id,
            },
        }
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            resp = self._client.post(self._endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error(
                "Push request failed",
                extra={"recipient_id": recipient_id, "message_id": message.id, "reason": str(e)},
            )
            raise NotificationDeliveryError(str(e)) from e

        if resp.status_code >= 400:
            try:
                error_json = resp.json()
            except ValueError:
                error_json = None
            error_message = error_json.get("error", resp.text) if isinstance(error_json, dict) else resp.text
            self._logger.error(
                "Push delivery rejected",
                extra={
                    "status": resp.status_code,
                    "reason": error_message,
                    "recipient_id": recipient_id,
                    "message_id": message.id,
                },
            )
            raise NotificationDeliveryError(f"Push endpoint answered {resp.status_code}: {error_message}")
