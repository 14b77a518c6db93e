"""Client for the health check endpoint."""

from __future__ import annotations

from cherry.client.base import CherryClient, CherryClientError
from cherry.common.models import HealthCheckResponse


class HealthClient(CherryClient):
    """Liveness probe client."""

    async def check(self) -> HealthCheckResponse:
        """
        Perform a health check.

        Raises:
            CherryClientError: On transport failure or non-200 status
        """
        response = await self.request("GET", "/health")
        if response.status != 200:
            raise CherryClientError(
                f"unexpected status code: {response.status}", response.status
            )

        data = response.json()
        if not isinstance(data, dict) or "status" not in data:
            raise CherryClientError("Failed to parse response: missing status", response.status)
        return HealthCheckResponse(status=str(data["status"]))
