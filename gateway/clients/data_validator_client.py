"""HTTP client for data validator node APIs."""

from typing import Any, Dict, Optional

import httpx

from common.constants import DATA_VALIDATOR_API_PREFIX, DATA_VALIDATOR_API_SCHEME, HTTP_TIMEOUT_SECONDS
from common.types import Node
from gateway.clients.base import ApiClient
from gateway.exceptions import UpstreamServiceError


class DataValidatorClient(ApiClient):
    """
    Talks to one data validator node.
    """

    service_name = "Data validator API"

    async def has_file(self, file_id: str) -> bool:
        """
        Ask the node whether it currently holds `file_id`.

        The node answers with a JSON boolean or an object with a boolean
        `result` field.
        """
        response = await self._request("GET", f"{DATA_VALIDATOR_API_PREFIX}/files/{file_id}/check")
        body = self._json(response, self.service_name)

        if isinstance(body, dict):
            body = body.get("result")
        if not isinstance(body, bool):
            raise UpstreamServiceError(
                f"{self.service_name} returned an unexpected possession answer",
                service=self.service_name, body=response.text
            )
        return body

    async def get_file_key(self, file_id: str, key_request: Dict[str, str]) -> Any:
        response = await self._request(
            "GET",
            f"{DATA_VALIDATOR_API_PREFIX}/files/{file_id}/key",
            params=key_request,
        )
        return self._json(response, self.service_name)


class DataValidatorClientFactory:
    """
    Builds a DataValidatorClient for a discovered node.
    """

    def __init__(
        self,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport

    def create(self, node: Node) -> DataValidatorClient:
        base_url = f"{DATA_VALIDATOR_API_SCHEME}://{node.ip_address}:{node.port}"
        return DataValidatorClient(base_url, timeout=self.timeout, transport=self.transport)
