"""Shared HTTP client plumbing for collaborator services."""

from typing import Any, Optional

import httpx

from common.constants import HTTP_TIMEOUT_SECONDS
from common.logging_config import get_logger
from gateway.exceptions import UpstreamServiceError

logger = get_logger(__name__)


class ApiClient:
    """
    Async HTTP client for one collaborator service.

    Transport failures and error responses are raised as UpstreamServiceError
    so callers can tell "unreachable" from "responded with status N".
    """

    service_name = "api"

    def __init__(
        self,
        base_url: str,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request and return the successful response.

        Raises:
            UpstreamServiceError: On timeout, connection failure or 4xx/5xx status
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{self.service_name} timed out: {method} {self.base_url}{path}")
            raise UpstreamServiceError(
                f"{self.service_name} timed out", service=self.service_name
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{self.service_name} is unreachable: {method} {self.base_url}{path}: {e}")
            raise UpstreamServiceError(
                f"{self.service_name} is unreachable", service=self.service_name
            ) from e

        if response.is_error:
            logger.error(
                f"{self.service_name} responded with {response.status_code} status: "
                f"{method} {self.base_url}{path}"
            )
            raise UpstreamServiceError(
                f"{self.service_name} responded with {response.status_code} status",
                service=self.service_name,
                status_code=response.status_code,
                body=response.text,
            )

        return response

    @staticmethod
    def _json(response: httpx.Response, service: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamServiceError(
                f"{service} returned a non-JSON body", service=service,
                status_code=response.status_code, body=response.text
            ) from e
