"""Webhook Service - Receives and acknowledges Todoist webhooks."""

import sys
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
import uvicorn

from cherry.common.auth import WebhookSignatureMiddleware
from cherry.common.errors import ErrorCode, error_response
from cherry.common.filelog import LeveledLogger, LoggerError, RotatingFileLogger, resolve_log_path
from cherry.common.http import RequestIdMiddleware
from cherry.common.logging import get_logger, setup_logging
from cherry.common.metrics import MetricsMiddleware, metrics_endpoint
from cherry.common.models import PayloadError, TodoistWebhookRequest
from cherry.common.settings import Settings, get_settings
from cherry.server.todoist import HealthService, TodoistService

logger = get_logger(__name__)


class WebhookServer:
    """HTTP handlers for the webhook service."""

    def __init__(self, settings: Settings, log: LeveledLogger):
        """
        Initialize server.

        Args:
            settings: Application settings
            log: Leveled logger receiving request logs
        """
        self._settings = settings
        self._log = log
        self._todoist = TodoistService(log)
        self._health = HealthService()

    async def startup(self) -> None:
        """Log the effective configuration."""
        logger.info(
            "Starting webhook service",
            webhook_path=self._settings.webhook_path,
            verification=self._settings.verification_enabled,
        )
        if not self._settings.verification_enabled:
            logger.warning("Webhook signature verification disabled")

    async def shutdown(self) -> None:
        logger.info("Webhook service stopped")

    async def handle_todoist_webhook(self, request: Request) -> JSONResponse:
        """Parse, process and acknowledge a Todoist webhook."""
        try:
            data = await request.json()
        except ValueError as e:
            self._log.error("Error parsing webhook payload: %s", e)
            return error_response(ErrorCode.INVALID_JSON, "Bad Request", 400)

        try:
            webhook = TodoistWebhookRequest.from_dict(data)
        except PayloadError as e:
            self._log.error("Error parsing webhook payload: %s", e)
            if e.field is None:
                code = ErrorCode.INVALID_JSON
            elif e.field == "event_name":
                code = ErrorCode.MISSING_FIELD
            else:
                code = ErrorCode.INVALID_FIELD
            details = {"field": e.field} if e.field else None
            return error_response(code, "Bad Request", 400, details)

        try:
            response = self._todoist.process_webhook(webhook)
        except Exception as e:
            self._log.error("Error processing webhook: %s", e)
            return error_response(ErrorCode.INTERNAL_ERROR, "Internal Server Error", 500)

        return JSONResponse(response.to_dict())

    async def handle_health(self, request: Request) -> JSONResponse:
        """Health check."""
        self._log.info("Received health check request")
        response = self._health.check()
        self._log.info("Health check successful")
        return JSONResponse(response.to_dict())


def create_logger(settings: Settings) -> RotatingFileLogger:
    """Create the daily file logger described by ``settings``."""
    return RotatingFileLogger(
        resolve_log_path(settings.log_path),
        prefix=settings.log_prefix,
    )


def create_app(
    settings: Settings | None = None,
    log: LeveledLogger | None = None,
) -> Starlette:
    """
    Create the Starlette application.

    Args:
        settings: Application settings (cached environment settings if None)
        log: Leveled logger; a RotatingFileLogger is created and owned by
            the app when omitted

    Raises:
        LoggerError: If the log directory or file cannot be created
    """
    settings = settings or get_settings()
    owned = log is None
    file_log: LeveledLogger = log if log is not None else create_logger(settings)
    server = WebhookServer(settings, file_log)

    @asynccontextmanager
    async def lifespan(app: Starlette):
        await server.startup()
        yield
        await server.shutdown()
        if owned and isinstance(file_log, RotatingFileLogger):
            file_log.close()

    routes = [
        Route(settings.webhook_path, server.handle_todoist_webhook, methods=["POST"]),
        Route("/health", server.handle_health, methods=["GET"]),
        Route("/metrics", metrics_endpoint, methods=["GET"]),
    ]

    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.logger = file_log

    app.add_middleware(WebhookSignatureMiddleware, settings=settings, logger=file_log)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        MetricsMiddleware,
        exclude_paths=["/metrics"],
    )

    return app


def main():
    """Entry point for the webhook service."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)

    try:
        app = create_app(settings)
    except LoggerError as e:
        logger.error("Failed to create logger", error=str(e))
        sys.exit(1)

    logger.info("Server starting", host=settings.host, port=settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
