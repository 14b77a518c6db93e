"""Client library for the Cherry webhook service."""

from cherry.client.base import CherryClient, CherryClientError, ClientResponse
from cherry.client.health import HealthClient
from cherry.client.todoist import (
    TodoistWebhookClient,
    encode_payload,
    sample_event_data,
)

__all__ = [
    "CherryClient",
    "CherryClientError",
    "ClientResponse",
    "HealthClient",
    "TodoistWebhookClient",
    "encode_payload",
    "sample_event_data",
]
