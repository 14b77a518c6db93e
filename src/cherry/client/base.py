"""Base HTTP client for the webhook service."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from cherry.common.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


class CherryClientError(Exception):
    """Error communicating with the webhook service."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class ClientResponse:
    """Fully read HTTP response."""

    status: int
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Decode the body as JSON."""
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise CherryClientError(f"Failed to parse response: {e}", self.status) from e


class CherryClient:
    """
    Minimal async REST client.

    Use as an async context manager, or call ``close()`` when done.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the client.

        Args:
            base_url: Service base URL, e.g. ``http://localhost:8080``
            timeout: Total request timeout in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "CherryClient":
        """Enter async context."""
        self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        await self.close()

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session exists."""
        if not self._session:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def request(
        self,
        method: str,
        path: str,
        body: bytes | None = None,
        headers: dict[str, str] | None = None,
        query: dict[str, str] | None = None,
    ) -> ClientResponse:
        """
        Execute a request and read the whole response.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            body: Raw request body, sent as JSON content
            headers: Extra request headers
            query: Query parameters

        Returns:
            The read response

        Raises:
            CherryClientError: On transport failure
        """
        url = f"{self._base_url}{path}"
        request_headers = {"Content-Type": "application/json"}
        request_headers.update(headers or {})

        logger.debug("Sending request", method=method, url=url)

        session = self._ensure_session()
        try:
            response = await session.request(
                method,
                url,
                data=body,
                headers=request_headers,
                params=query,
            )
            async with response:
                payload = await response.read()
                return ClientResponse(
                    status=response.status,
                    body=payload,
                    headers=dict(response.headers),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise CherryClientError(f"Request failed: {e}") from e
