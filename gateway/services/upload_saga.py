"""Upload saga: local bytes -> storage network -> billing -> payment notification."""

import asyncio
from typing import Dict, Optional

from common.logging_config import get_logger
from common.types import SignedRequest
from gateway import config
from gateway.clients.billing_client import BillingClient
from gateway.clients.storage_network_client import StorageNetworkClient
from gateway.database import get_db_connection
from gateway.exceptions import (
    InvalidSignatureError,
    LocalFileNotFoundError,
    UploadNotAllowedError,
)
from gateway.record_locks import RecordLockRegistry
from gateway.repositories.local_file_repository import LocalFileRecordRepository
from gateway.repositories.stage_event_repository import StageEventRepository
from gateway.signatures import SignatureVerifier
from gateway.storage import local_byte_store
from gateway.types import LocalFileRecord, StageEventStatus, UploadStage

logger = get_logger(__name__)


class UploadSagaOrchestrator:
    """
    Drives a local file record through UPLOADING, PAYING and NOTIFYING.

    submit() validates the request and returns at once; the stages then run
    in a background task. Every transition is saved together with a stage
    event, so the record's stage and trace survive a crash mid-run. A failure
    marks the record FAILED and keeps whatever earlier stages produced: side
    effects already performed on the storage network or billing service are
    not compensated.
    """

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
        self.event_repo = StageEventRepository()
        self._tasks: Dict[str, asyncio.Task] = {}

    async def submit(self, record_id: str, signed_request: SignedRequest) -> Dict[str, bool]:
        """
        Accept a record for upload and start the saga in the background.

        Raises:
            LocalFileNotFoundError: If the record does not exist
            InvalidSignatureError: If the request is not signed by the record's data validator
            UploadNotAllowedError: If the record is not pending, is deleted, or is already uploading
        """
        record = self.record_repo.find_by_id(record_id)
        if record is None:
            raise LocalFileNotFoundError(f"Could not find local file with id {record_id}")

        if not record.data_validator_address:
            raise UploadNotAllowedError(f"Local file {record_id} is not addressed to a data validator")

        if not self.verifier.is_valid(record.data_validator_address, signed_request):
            raise InvalidSignatureError("Signature is invalid")

        if self.is_running(record_id):
            raise UploadNotAllowedError(f"Upload of local file {record_id} is already in progress")

        if record.deleted_locally:
            raise UploadNotAllowedError(f"Local file {record_id} has been deleted")

        if record.stage != UploadStage.PENDING:
            raise UploadNotAllowedError(
                f"Local file {record_id} cannot be uploaded in stage {record.stage.value}"
            )

        task = asyncio.create_task(self._run(record_id, signed_request), name=f"upload-saga-{record_id}")
        self._tasks[record_id] = task
        task.add_done_callback(lambda _: self._tasks.pop(record_id, None))

        logger.info(f"Accepted local file {record_id} for upload")
        return {"success": True}

    def is_running(self, record_id: str) -> bool:
        return record_id in self._tasks

    async def join(self, record_id: str) -> None:
        """Wait for the record's saga, if one is running."""
        task = self._tasks.get(record_id)
        if task is not None:
            await task

    async def drain(self) -> None:
        """Wait for every running saga to finish."""
        if self._tasks:
            logger.info(f"Waiting for {len(self._tasks)} upload saga(s) to finish")
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def _run(self, record_id: str, signed_request: SignedRequest) -> None:
        async with self.locks.lock_for(record_id):
            record = self.record_repo.find_by_id(record_id)
            if record is None or record.stage != UploadStage.PENDING:
                logger.warning(f"Local file {record_id} is no longer pending, upload saga not started")
                return

            if record.deleted_locally:
                logger.warning(f"Local file {record_id} was deleted before upload, upload saga not started")
                return

            logger.info(f"Started processing data uploading [record_id={record_id}]")
            stage = UploadStage.UPLOADING

            try:
                self._enter(record, stage)
                data = local_byte_store.read_bytes(record.local_path)
                upload = await self.storage_client.upload(record, data)
                record.dds_id = upload.dds_id
                record.storage_price = upload.price
                self._transition(record, stage, StageEventStatus.COMPLETED, f"dds_id={upload.dds_id}")

                stage = UploadStage.PAYING
                self._enter(record, stage)
                payment = await self.billing_client.pay_for_upload(
                    record, signed_request, upload.price, upload.dds_id
                )
                record.data_owner_address = payment.owner_address
                record.private_key = payment.private_key
                self._transition(record, stage, StageEventStatus.COMPLETED)

                stage = UploadStage.NOTIFYING
                if self.notify_payment_status:
                    self._enter(record, stage)
                    await self.storage_client.notify_payment(upload.dds_id, upload.price)
                    self._transition(record, stage, StageEventStatus.COMPLETED)
                else:
                    self._transition(record, stage, StageEventStatus.SKIPPED, "payment notification disabled")

                record.failed = False
                record.failed_stage = None
                record.uploaded_to_dds = True
                record.stage = UploadStage.COMPLETE
                self._transition(record, UploadStage.COMPLETE, StageEventStatus.COMPLETED)

                logger.info(f"File uploading has been completed [record_id={record_id}]")
            except Exception as e:
                self._fail(record, stage, e)

    def _enter(self, record: LocalFileRecord, stage: UploadStage) -> None:
        record.stage = stage
        self._transition(record, stage, StageEventStatus.STARTED)

    def _transition(
        self,
        record: LocalFileRecord,
        stage: UploadStage,
        status: StageEventStatus,
        detail: Optional[str] = None,
    ) -> None:
        """Save the record and append the stage event in one transaction."""
        with get_db_connection() as conn:
            try:
                self.record_repo.save(record, conn=conn)
                self.event_repo.record_event(record.record_id, stage, status, detail, conn=conn)
                conn.commit()
            except Exception:
                conn.rollback()
                raise

        logger.info(f"Upload stage {stage.value} {status.value} [record_id={record.record_id}]")

    def _fail(self, record: LocalFileRecord, stage: UploadStage, error: Exception) -> None:
        logger.error(f"Data upload failed at stage {stage.value} [record_id={record.record_id}]: {error}")

        body = getattr(error, "body", None)
        if body:
            logger.debug(f"Downstream response for record {record.record_id}: {body}")

        record.failed = True
        record.uploaded_to_dds = False
        record.failed_stage = stage
        record.stage = UploadStage.FAILED

        try:
            self._transition(record, stage, StageEventStatus.FAILED, str(error) or type(error).__name__)
        except Exception as e:
            logger.error(
                f"Could not persist failure of local file {record.record_id}: {e}", exc_info=True
            )
