"""File key resolver: proxies key requests to the node holding a file."""

from typing import Any

from common.logging_config import get_logger
from gateway.clients.data_validator_client import DataValidatorClientFactory
from gateway.exceptions import FileKeyRetrievalError, InvalidSignatureError
from gateway.services.possession_probe import PossessionProbe
from gateway.signatures import SignatureVerifier
from gateway.types import FileKeyRequest

logger = get_logger(__name__)


class FileKeyResolver:
    def __init__(
        self,
        verifier: SignatureVerifier,
        probe: PossessionProbe,
        client_factory: DataValidatorClientFactory,
    ):
        self.verifier = verifier
        self.probe = probe
        self.client_factory = client_factory

    async def get_file_key(self, file_id: str, key_request: FileKeyRequest) -> Any:
        """
        Return the key payload for `file_id` exactly as the holding node sent it.

        Raises:
            InvalidSignatureError: If the request is not signed by the address it claims
            ValidatorNodeNotFoundError: If no data validator node is registered
            NoNodePossessesFileError: If no candidate node holds the file
            FileKeyRetrievalError: If the holding node fails to return the key
        """
        signed_request = key_request.signed_request
        if not self.verifier.is_valid(signed_request.address, signed_request):
            raise InvalidSignatureError("Signature is invalid")

        node = await self.probe.resolve_holding_node(file_id, key_request.data_validator_address)

        try:
            async with self.client_factory.create(node) as client:
                return await client.get_file_key(file_id, key_request.to_query_params())
        except Exception as e:
            logger.error(
                f"Error occurred when tried to get file key from data validator node "
                f"{node.node_id} ({node.ip_address}:{node.port}): {e}"
            )
            raise FileKeyRetrievalError(
                f"Error occurred when tried to get key of file with id {file_id}",
                file_id=file_id,
            ) from e
