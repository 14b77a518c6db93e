"""Todoist webhook event handling."""

from __future__ import annotations

from cherry.common.filelog import LeveledLogger
from cherry.common.metrics import record_webhook_event
from cherry.common.models import (
    HealthCheckResponse,
    TodoistWebhookRequest,
    TodoistWebhookResponse,
)

ACK_MESSAGE = "Webhook received"

# event name -> verb used in the log line
ITEM_EVENTS = {
    "item:added": "added",
    "item:updated": "updated",
    "item:deleted": "deleted",
    "item:completed": "completed",
}


class TodoistService:
    """Processes verified Todoist webhook notifications."""

    def __init__(self, logger: LeveledLogger):
        self._logger = logger

    @property
    def logger(self) -> LeveledLogger:
        return self._logger

    def process_webhook(self, request: TodoistWebhookRequest) -> TodoistWebhookResponse:
        """
        Log a webhook event and acknowledge it.

        Known item events are logged with the acting user; anything else
        is logged as unhandled. Every event is acknowledged.
        """
        self._logger.info("Processing webhook event: %s", request.event_name)

        verb = ITEM_EVENTS.get(request.event_name)
        if verb is not None:
            self._logger.info("Item %s by user %s", verb, request.user_id)
            record_webhook_event(request.event_name, "processed")
        else:
            self._logger.warn("Unhandled event type: %s", request.event_name)
            record_webhook_event("other", "unhandled")

        return TodoistWebhookResponse(success=True, message=ACK_MESSAGE)


class HealthService:
    """Liveness check."""

    def check(self) -> HealthCheckResponse:
        return HealthCheckResponse(status="OK")
