"""Cherry webhook service."""

from cherry.server.main import WebhookServer, create_app
from cherry.server.todoist import HealthService, TodoistService

__all__ = [
    "HealthService",
    "TodoistService",
    "WebhookServer",
    "create_app",
]
