"""Service locator for gateway components."""

from typing import Optional

from gateway import config
from gateway.clients.billing_client import BillingClient
from gateway.clients.data_validator_client import DataValidatorClientFactory
from gateway.clients.discovery_client import DiscoveryClient
from gateway.clients.storage_network_client import StorageNetworkClient
from gateway.record_locks import RecordLockRegistry
from gateway.services.file_key_service import FileKeyResolver
from gateway.services.local_file_service import LocalFileService
from gateway.services.node_discovery import NodeDiscoveryResolver
from gateway.services.possession_probe import PossessionProbe
from gateway.services.storage_extension_service import StorageExtensionService
from gateway.services.upload_saga import UploadSagaOrchestrator
from gateway.signatures import SignatureVerifier

_storage_client: Optional[StorageNetworkClient] = None
_billing_client: Optional[BillingClient] = None
_discovery_client: Optional[DiscoveryClient] = None
_local_file_service: Optional[LocalFileService] = None
_upload_saga: Optional[UploadSagaOrchestrator] = None
_file_key_resolver: Optional[FileKeyResolver] = None
_storage_extension_service: Optional[StorageExtensionService] = None


def init_services(
    storage_client: Optional[StorageNetworkClient] = None,
    billing_client: Optional[BillingClient] = None,
    discovery_client: Optional[DiscoveryClient] = None,
    validator_client_factory: Optional[DataValidatorClientFactory] = None,
    verifier: Optional[SignatureVerifier] = None,
    files_directory: Optional[str] = None,
    notify_payment_status: Optional[bool] = None,
) -> None:
    """
    Build the global service graph. Collaborator clients default to the
    configured base URLs; tests pass clients with mock transports.
    """
    global _storage_client, _billing_client, _discovery_client
    global _local_file_service, _upload_saga, _file_key_resolver, _storage_extension_service

    timeout = config.HTTP_TIMEOUT_SECONDS
    _storage_client = storage_client or StorageNetworkClient(config.STORAGE_API_BASE_URL, timeout=timeout)
    _billing_client = billing_client or BillingClient(config.BILLING_API_BASE_URL, timeout=timeout)
    _discovery_client = discovery_client or DiscoveryClient(config.DISCOVERY_API_BASE_URL, timeout=timeout)
    validator_client_factory = validator_client_factory or DataValidatorClientFactory(timeout=timeout)
    verifier = verifier or SignatureVerifier()
    locks = RecordLockRegistry()

    _local_file_service = LocalFileService(locks, files_directory=files_directory)
    _upload_saga = UploadSagaOrchestrator(
        verifier, _storage_client, _billing_client, locks,
        notify_payment_status=notify_payment_status,
    )
    _file_key_resolver = FileKeyResolver(
        verifier,
        PossessionProbe(NodeDiscoveryResolver(_discovery_client), validator_client_factory),
        validator_client_factory,
    )
    _storage_extension_service = StorageExtensionService(
        verifier, _storage_client, _billing_client, locks,
        notify_payment_status=notify_payment_status,
    )


async def close_services() -> None:
    """Wait for running sagas, then close collaborator clients."""
    if _upload_saga is not None:
        await _upload_saga.drain()

    for client in (_storage_client, _billing_client, _discovery_client):
        if client is not None:
            await client.close()


def _require(service, name: str):
    if service is None:
        raise RuntimeError(f"{name} is not initialized, call init_services() first")
    return service


def get_local_file_service() -> LocalFileService:
    """Get global local file service instance"""
    return _require(_local_file_service, "LocalFileService")


def get_upload_saga() -> UploadSagaOrchestrator:
    """Get global upload saga orchestrator instance"""
    return _require(_upload_saga, "UploadSagaOrchestrator")


def get_file_key_resolver() -> FileKeyResolver:
    """Get global file key resolver instance"""
    return _require(_file_key_resolver, "FileKeyResolver")


def get_storage_extension_service() -> StorageExtensionService:
    """Get global storage extension service instance"""
    return _require(_storage_extension_service, "StorageExtensionService")
