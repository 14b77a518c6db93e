"""Webhook signature verification middleware."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from cherry.common.errors import ErrorCode, error_response
from cherry.common.filelog import LeveledLogger
from cherry.common.hmac import verify
from cherry.common.http import get_request_id
from cherry.common.logging import get_logger
from cherry.common.metrics import record_signature_check
from cherry.common.settings import Settings

diag = get_logger(__name__)


class WebhookSignatureMiddleware(BaseHTTPMiddleware):
    """
    Reject webhook calls whose HMAC signature does not match the body.

    Only POSTs to the configured webhook path are checked. When no client
    secret is configured every call is let through with a warning.
    """

    def __init__(self, app: ASGIApp, settings: Settings, logger: LeveledLogger) -> None:
        super().__init__(app)
        self._settings = settings
        self._logger = logger
        self._protected_paths = {settings.webhook_path}

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method != "POST" or request.url.path not in self._protected_paths:
            return await call_next(request)

        log = self._logger
        log.info("Received webhook request from Todoist")

        secret = self._settings.todoist_client_secret
        if not secret:
            log.warn("TODOIST_CLIENT_SECRET not set")
            log.warn("Skipping signature verification as TODOIST_CLIENT_SECRET is not set")
            record_signature_check("skipped")
            return await call_next(request)

        header = self._settings.signature_header
        signature = request.headers.get(header)
        if not signature:
            log.error("Missing %s header", header)
            return self._reject("missing")

        body = await request.body()
        if not verify(body, signature, secret):
            log.error("Invalid signature")
            return self._reject("invalid")

        log.info("Webhook signature verified successfully")
        record_signature_check("valid")
        return await call_next(request)

    def _reject(self, reason: str) -> Response:
        record_signature_check(reason)
        diag.warning("Webhook signature rejected", reason=reason, request_id=get_request_id())
        return error_response(ErrorCode.UNAUTHORIZED, "Unauthorized", 401)
