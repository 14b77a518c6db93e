"""Client for the Todoist webhook endpoint."""

from __future__ import annotations

import json
from typing import Any

from cherry.client.base import DEFAULT_TIMEOUT, CherryClient, CherryClientError
from cherry.common.hmac import sign
from cherry.common.models import TodoistWebhookRequest, TodoistWebhookResponse

WEBHOOK_PATH = "/webhooks/todoist"
SIGNATURE_HEADER = "X-Todoist-Hmac-SHA256"


def encode_payload(request: TodoistWebhookRequest) -> bytes:
    """Serialize a webhook request to the exact bytes that get signed."""
    return json.dumps(request.to_dict(), separators=(",", ":")).encode("utf-8")


def sample_event_data() -> dict[str, Any]:
    """Task payload used when simulating webhooks."""
    return {
        "id": "123456789",
        "content": "Test task",
        "description": "This is a test task created by the webhook simulator",
        "due": {
            "date": "2023-12-31",
            "is_recurring": False,
            "string": "Dec 31",
        },
        "priority": 1,
    }


class TodoistWebhookClient(CherryClient):
    """Sends (optionally signed) Todoist webhook notifications."""

    def __init__(
        self,
        base_url: str,
        secret: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        path: str = WEBHOOK_PATH,
    ):
        super().__init__(base_url, timeout=timeout)
        self._secret = secret
        self._path = path

    def set_secret(self, secret: str | None) -> None:
        """Set the client secret used to sign requests."""
        self._secret = secret

    def signature_headers(self, body: bytes) -> dict[str, str]:
        """Signature header for ``body``, empty without a secret."""
        if not self._secret:
            return {}
        return {SIGNATURE_HEADER: sign(body, self._secret)}

    async def process_webhook(self, request: TodoistWebhookRequest) -> TodoistWebhookResponse:
        """
        Post a webhook notification.

        Raises:
            CherryClientError: On transport failure, non-200 status or an
                unparsable acknowledgement
        """
        body = encode_payload(request)
        response = await self.request(
            "POST",
            self._path,
            body=body,
            headers=self.signature_headers(body),
        )
        if response.status != 200:
            raise CherryClientError(
                f"unexpected status code: {response.status}", response.status
            )

        data = response.json()
        try:
            return TodoistWebhookResponse.from_dict(data)
        except (KeyError, TypeError) as e:
            raise CherryClientError(f"Failed to parse response: {e}", response.status) from e
