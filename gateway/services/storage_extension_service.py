"""Extension of the storage duration of files already on the storage network."""

from typing import Dict, Optional

from common.logging_config import get_logger
from common.types import SignedRequest
from gateway import config
from gateway.clients.billing_client import BillingClient
from gateway.clients.storage_network_client import StorageNetworkClient
from gateway.exceptions import (
    ExtensionNotAllowedError,
    InvalidSignatureError,
    StorageFileNotFoundError,
)
from gateway.record_locks import RecordLockRegistry
from gateway.repositories.local_file_repository import LocalFileRecordRepository
from gateway.signatures import SignatureVerifier
from gateway.utils import seconds_until

logger = get_logger(__name__)


class StorageExtensionService:
    def __init__(
        self,
        verifier: SignatureVerifier,
        storage_client: StorageNetworkClient,
        billing_client: BillingClient,
        locks: RecordLockRegistry,
        notify_payment_status: Optional[bool] = None,
    ):
        self.verifier = verifier
        self.storage_client = storage_client
        self.billing_client = billing_client
        self.locks = locks
        self.notify_payment_status = (
            config.NOTIFY_PAYMENT_STATUS if notify_payment_status is None else notify_payment_status
        )
        self.record_repo = LocalFileRecordRepository()

    async def extend_storage_duration(
        self,
        dds_id: str,
        keep_until: str,
        signed_request: SignedRequest,
    ) -> Dict[str, bool]:
        """
        Keep an uploaded file on the storage network until `keep_until`,
        paying for the extension on behalf of the file's data validator.

        Raises:
            StorageFileNotFoundError: If no local record carries this storage id
            InvalidSignatureError: If the request is not signed by the data validator
            ExtensionNotAllowedError: If the file was never fully uploaded and paid for
            UpstreamServiceError: If the storage network or billing service fails
        """
        record = self.record_repo.find_by_external_id(dds_id)
        if record is None:
            raise StorageFileNotFoundError(f"Could not find file with id {dds_id}")

        if not self.verifier.is_valid(record.data_validator_address, signed_request):
            raise InvalidSignatureError("Signature is invalid")

        if not record.uploaded_to_dds:
            raise ExtensionNotAllowedError(
                f"File {dds_id} has not completed its upload, storage cannot be extended"
            )

        duration = seconds_until(keep_until)
        logger.info(f"Extending storage duration of file {dds_id} by {duration}s")

        price = await self.storage_client.extend_duration(dds_id, duration)

        await self.billing_client.pay_for_extension(
            amount=price,
            service_node=record.service_node_address,
            data_validator=record.data_validator_address,
            signed_request=signed_request,
        )

        if self.notify_payment_status:
            await self.storage_client.notify_payment(dds_id, price)

        async with self.locks.lock_for(record.record_id):
            record = self.record_repo.find_by_id(record.record_id)
            record.keep_until = keep_until
            self.record_repo.save(record)

        logger.info(f"Extended storage duration of file {dds_id} until {keep_until} for {price}")
        return {"success": True}
