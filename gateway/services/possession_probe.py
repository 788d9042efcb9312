"""Possession probe: find the data validator node that holds a file."""

from common.logging_config import get_logger
from common.types import Node, NodeType
from gateway.clients.data_validator_client import DataValidatorClientFactory
from gateway.exceptions import NoNodePossessesFileError, ValidatorNodeNotFoundError
from gateway.services.node_discovery import NodeDiscoveryResolver

logger = get_logger(__name__)


class PossessionProbe:
    """
    Asks candidate data validator nodes, one at a time and in discovery
    order, whether they hold a file.
    """

    def __init__(
        self,
        discovery: NodeDiscoveryResolver,
        client_factory: DataValidatorClientFactory,
    ):
        self.discovery = discovery
        self.client_factory = client_factory

    async def resolve_holding_node(self, file_id: str, validator_address: str) -> Node:
        """
        Return the first candidate node that affirms holding `file_id`.

        A negative answer or a failed probe moves on to the next candidate.

        Raises:
            ValidatorNodeNotFoundError: If discovery returns no candidates
            NoNodePossessesFileError: If no candidate affirms possession
        """
        candidates = await self.discovery.find_nodes(validator_address, NodeType.DATA_VALIDATOR_NODE)

        if not candidates:
            raise ValidatorNodeNotFoundError(
                f"Could not find any data validator node with {validator_address} address"
            )

        for index, node in enumerate(candidates, start=1):
            if await self._probe(node, file_id):
                logger.info(
                    f"Data validator node {node.node_id} possesses file {file_id} "
                    f"(candidate {index}/{len(candidates)})"
                )
                return node

        raise NoNodePossessesFileError(
            f"Could not find any data validator node which possesses file with id {file_id}"
        )

    async def _probe(self, node: Node, file_id: str) -> bool:
        try:
            async with self.client_factory.create(node) as client:
                has_file = await client.has_file(file_id)
        except Exception as e:
            logger.warning(
                f"Possession check failed on data validator node {node.node_id} "
                f"({node.ip_address}:{node.port}) for file {file_id}, trying next one: {e}"
            )
            return False

        if not has_file:
            logger.info(
                f"Data validator node {node.node_id} does not possess file {file_id}, trying next one"
            )
        return has_file
