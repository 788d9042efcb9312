"""Tests for storage duration extension."""

import httpx
import pytest

from gateway.exceptions import (
    ErrorKind,
    ExtensionNotAllowedError,
    InvalidSignatureError,
    StorageFileNotFoundError,
    UpstreamServiceError,
)
from gateway.repositories.local_file_repository import LocalFileRecordRepository
from gateway.services.storage_extension_service import StorageExtensionService
from gateway.signatures import RequestSigner, SignatureVerifier
from gateway.types import UploadStage

NEW_KEEP_UNTIL = "2031-06-01T00:00:00Z"


@pytest.fixture
def extensions(storage_client, billing_client, locks) -> StorageExtensionService:
    return StorageExtensionService(
        SignatureVerifier(), storage_client, billing_client, locks, notify_payment_status=True
    )


@pytest.fixture
def uploaded_record(make_record):
    record = make_record()
    record.dds_id = "dds-ext-1"
    record.storage_price = 12.5
    record.data_owner_address = "owner-address-1"
    record.private_key = "owner-private-key-1"
    record.uploaded_to_dds = True
    record.stage = UploadStage.COMPLETE
    return LocalFileRecordRepository.save(record)


class TestExtendStorageDuration:

    @pytest.mark.asyncio
    async def test_extension_pays_and_updates_keep_until(
        self, extensions, uploaded_record, validator_signer, network
    ):
        signed = validator_signer.sign("extend")

        result = await extensions.extend_storage_duration("dds-ext-1", NEW_KEEP_UNTIL, signed)

        assert result == {"success": True}
        assert LocalFileRecordRepository.find_by_id(uploaded_record.record_id).keep_until == NEW_KEEP_UNTIL

        patch_request = network.requests_to("storage.test", "/files/dds-ext-1")[0]
        assert patch_request.method == "PATCH"
        assert network.sent_json(patch_request)["duration"] > 0

        payment = network.sent_json(network.requests_to("billing.test", "/files/extend-storage")[0])
        assert payment == {
            "sum": "3.0",
            "serviceNode": "service-node-address",
            "dataValidator": validator_signer.address,
            "signature": signed.to_dict(),
        }

        notification = network.sent_json(
            network.requests_to("storage.test", "/notify-payment-status")[0]
        )
        assert notification == {"file_id": "dds-ext-1", "amount": 3.0, "status": "success"}

    @pytest.mark.asyncio
    async def test_unknown_file_is_not_found(self, extensions, validator_signer, test_db):
        with pytest.raises(StorageFileNotFoundError) as exc_info:
            await extensions.extend_storage_duration("missing", NEW_KEEP_UNTIL, validator_signer.sign("x"))

        assert exc_info.value.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_foreign_signature_is_forbidden(self, extensions, uploaded_record, network):
        with pytest.raises(InvalidSignatureError):
            await extensions.extend_storage_duration(
                "dds-ext-1", NEW_KEEP_UNTIL, RequestSigner().sign("extend")
            )

        assert network.requests == []

    @pytest.mark.asyncio
    async def test_billing_failure_keeps_old_keep_until(
        self, extensions, uploaded_record, validator_signer, network
    ):
        network.extension_payment_response = httpx.Response(402, json={"error": "no funds"})

        with pytest.raises(UpstreamServiceError) as exc_info:
            await extensions.extend_storage_duration("dds-ext-1", NEW_KEEP_UNTIL, validator_signer.sign("extend"))

        assert exc_info.value.status_code == 402
        stored = LocalFileRecordRepository.find_by_id(uploaded_record.record_id)
        assert stored.keep_until == "2030-01-01T00:00:00Z"

    @pytest.mark.asyncio
    async def test_notification_can_be_disabled(
        self, storage_client, billing_client, locks, uploaded_record, validator_signer, network
    ):
        extensions = StorageExtensionService(
            SignatureVerifier(), storage_client, billing_client, locks, notify_payment_status=False
        )

        await extensions.extend_storage_duration("dds-ext-1", NEW_KEEP_UNTIL, validator_signer.sign("extend"))

        assert network.requests_to("storage.test", "/notify-payment-status") == []

    @pytest.mark.asyncio
    async def test_file_with_unsettled_payment_cannot_be_extended(
        self, extensions, make_record, validator_signer, network
    ):
        record = make_record()
        record.dds_id = "dds-unpaid"
        record.storage_price = 12.5
        record.failed = True
        record.failed_stage = UploadStage.PAYING
        record.stage = UploadStage.FAILED
        LocalFileRecordRepository.save(record)

        with pytest.raises(ExtensionNotAllowedError) as exc_info:
            await extensions.extend_storage_duration("dds-unpaid", NEW_KEEP_UNTIL, validator_signer.sign("extend"))

        assert exc_info.value.kind == ErrorKind.CONFLICT
        assert network.requests == []
        assert LocalFileRecordRepository.find_by_id(record.record_id).keep_until == "2030-01-01T00:00:00Z"
