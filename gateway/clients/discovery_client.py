"""HTTP client for the discovery directory."""

from typing import List

from common.logging_config import get_logger
from common.types import Node
from gateway.clients.base import ApiClient
from gateway.exceptions import UpstreamServiceError

logger = get_logger(__name__)


class DiscoveryClient(ApiClient):
    """
    Looks up node endpoints registered under an address and node type.
    """

    service_name = "Discovery API"

    async def find_nodes(self, address: str, node_type: str) -> List[Node]:
        response = await self._request(
            "GET",
            "/api/v1/discovery/nodes",
            params={"address": address, "type": node_type},
        )
        body = self._json(response, self.service_name)

        if not isinstance(body, list):
            raise UpstreamServiceError(
                f"{self.service_name} returned an unexpected node list",
                service=self.service_name, body=response.text
            )

        nodes = []
        for entry in body:
            try:
                nodes.append(Node.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed node entry from discovery: {entry!r} ({e})")

        return nodes
