"""Wire models shared by the webhook server and the client library."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


class PayloadError(ValueError):
    """Webhook payload has the wrong shape."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


@dataclass
class TodoistWebhookRequest:
    """Webhook notification as posted by Todoist."""

    event_name: str
    user_id: str = ""
    event_data: dict[str, Any] | str | None = None
    version: str = ""
    initiator: dict[str, Any] | None = None
    triggered_at: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "TodoistWebhookRequest":
        """
        Build a request from decoded JSON.

        Raises:
            PayloadError: If ``data`` is not an object, lacks ``event_name``
                or carries a mistyped optional field
        """
        if not isinstance(data, dict):
            raise PayloadError("Webhook payload must be a JSON object")

        event_name = data.get("event_name")
        if not isinstance(event_name, str) or not event_name:
            raise PayloadError("Missing required field: event_name", field="event_name")

        initiator = data.get("initiator")
        if initiator is not None and not isinstance(initiator, dict):
            raise PayloadError("Field initiator must be an object", field="initiator")

        triggered_at = data.get("triggered_at")
        if triggered_at is not None and not isinstance(triggered_at, str):
            raise PayloadError("Field triggered_at must be a string", field="triggered_at")

        user_id = data.get("user_id")
        version = data.get("version")
        return cls(
            event_name=event_name,
            user_id="" if user_id is None else str(user_id),
            event_data=data.get("event_data"),
            version="" if version is None else str(version),
            initiator=initiator,
            triggered_at=triggered_at,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        # Optional Todoist fields are only sent when present.
        for key in ("initiator", "triggered_at"):
            if data[key] is None:
                del data[key]
        return data


@dataclass
class TodoistWebhookResponse:
    """Acknowledgement returned for every accepted webhook."""

    success: bool
    message: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TodoistWebhookResponse":
        return cls(success=bool(data["success"]), message=str(data["message"]))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class HealthCheckResponse:
    """Liveness probe result."""

    status: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
