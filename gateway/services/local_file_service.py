"""Local file lifecycle: staging, chunk appends, soft deletion, status."""

from typing import Any, Dict, List, Optional

from common.logging_config import get_logger
from gateway import config
from gateway.exceptions import (
    LocalFileAlreadyDeletedError,
    LocalFileNotFoundError,
    StorageFileNotFoundError,
)
from gateway.record_locks import RecordLockRegistry
from gateway.repositories.local_file_repository import LocalFileRecordRepository
from gateway.repositories.stage_event_repository import StageEventRepository
from gateway.storage import local_byte_store
from gateway.types import LocalFileRecord, StageEvent, UploadStatus
from gateway.utils import generate_uuid

logger = get_logger(__name__)


class LocalFileService:
    def __init__(
        self,
        locks: RecordLockRegistry,
        files_directory: Optional[str] = None,
        service_node_address: Optional[str] = None,
    ):
        self.locks = locks
        self.record_repo = LocalFileRecordRepository()
        self.event_repo = StageEventRepository()
        self.files_directory = files_directory or config.TEMPORARY_FILES_DIRECTORY
        self.service_node_address = service_node_address or config.SERVICE_NODE_ADDRESS

    def create_local_file_record(
        self,
        name: str,
        extension: str,
        mime_type: str,
        data_validator_address: str,
        keep_until: str,
        price: float = 0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> LocalFileRecord:
        """
        Stage a new, empty local file and persist its record.
        """
        record_id = generate_uuid()
        local_path = local_byte_store.get_local_path(self.files_directory, record_id)
        local_byte_store.create_empty(local_path)

        record = self.record_repo.create(
            LocalFileRecord(
                record_id=record_id,
                name=name,
                local_path=str(local_path),
                extension=extension,
                mime_type=mime_type,
                service_node_address=self.service_node_address,
                data_validator_address=data_validator_address,
                keep_until=keep_until,
                price=price,
                metadata=metadata or {},
            )
        )

        logger.info(f"Created local file record {record_id}")
        return record

    def get_record(self, record_id: str) -> LocalFileRecord:
        record = self.record_repo.find_by_id(record_id)
        if record is None:
            raise LocalFileNotFoundError(f"Could not find local file with id {record_id}")
        return record

    async def write_file_chunk(self, record_id: str, data: bytes) -> Dict[str, bool]:
        """
        Append a chunk to the staged bytes. Chunks are written in the order
        they arrive; ordering is the caller's responsibility.

        Raises:
            LocalFileNotFoundError: If the record does not exist
            LocalFileAlreadyDeletedError: If the record's bytes were deleted
        """
        # unknown ids never reach the lock registry
        self.get_record(record_id)

        async with self.locks.lock_for(record_id):
            record = self.get_record(record_id)

            if record.deleted_locally:
                raise LocalFileAlreadyDeletedError(
                    f"Local file with id {record_id} has been deleted"
                )

            logger.debug(f"Writing chunk of {len(data)} bytes to local file {record_id}")
            record.size = local_byte_store.append_bytes(record.local_path, data)
            self.record_repo.save(record)

        return {"success": True}

    async def delete_local_file(self, record_id: str) -> None:
        """
        Remove a record's staged bytes and mark it deleted.

        If removing the bytes fails the error is logged and the record is left
        untouched, so it is never marked deleted while its bytes remain.

        Raises:
            LocalFileNotFoundError: If the record does not exist
            LocalFileAlreadyDeletedError: If the record is already marked deleted
        """
        self.get_record(record_id)

        async with self.locks.lock_for(record_id):
            record = self.get_record(record_id)

            if record.deleted_locally:
                raise LocalFileAlreadyDeletedError(
                    f"Local file with id {record_id} has already been deleted"
                )

            if not local_byte_store.exists(record.local_path):
                logger.warning(f"Local file {record_id} has no bytes at {record.local_path}, nothing to delete")
                return

            try:
                local_byte_store.delete(record.local_path)
            except OSError as e:
                logger.error(f"Error occurred when tried to delete local file with id {record_id}: {e}")
                return

            record.deleted_locally = True
            self.record_repo.save(record)
            logger.info(f"Deleted local file {record_id}")

    def get_upload_status(self, record_id: str) -> UploadStatus:
        record = self.get_record(record_id)

        return UploadStatus(
            record_id=record.record_id,
            fully_uploaded=record.uploaded_to_dds,
            failed=record.failed,
            stage=record.stage,
            price=record.price,
            dds_file_id=record.dds_id,
            storage_price=record.storage_price,
            data_owner=record.data_owner_address,
            private_key=record.private_key,
        )

    def get_file_info(self, dds_id: str) -> LocalFileRecord:
        """
        Look up the local record of a file uploaded to the storage network.

        Raises:
            StorageFileNotFoundError: If no record carries this external id
        """
        record = self.record_repo.find_by_external_id(dds_id)
        if record is None:
            raise StorageFileNotFoundError(f"Could not find file with id {dds_id}")
        return record

    def list_stage_events(self, record_id: str) -> List[StageEvent]:
        """
        Upload saga trace of a record, oldest first.

        Raises:
            LocalFileNotFoundError: If the record does not exist
        """
        self.get_record(record_id)
        return self.event_repo.list_for_record(record_id)
