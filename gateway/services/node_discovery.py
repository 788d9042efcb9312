"""Node discovery resolver."""

from typing import List

from common.logging_config import get_logger
from common.types import Node, NodeType
from gateway.clients.discovery_client import DiscoveryClient

logger = get_logger(__name__)


class NodeDiscoveryResolver:
    """
    Resolves candidate node endpoints for an address and node type.
    Every call queries the directory; nothing is cached.
    """

    def __init__(self, discovery_client: DiscoveryClient):
        self.discovery_client = discovery_client

    async def find_nodes(self, address: str, node_type: NodeType) -> List[Node]:
        node_type_value = NodeType(node_type).value
        nodes = await self.discovery_client.find_nodes(address, node_type_value)
        logger.info(f"Discovery: {node_type_value} at {address} -> {len(nodes)} node(s)")
        return nodes
