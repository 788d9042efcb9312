"""Service layer for business logic."""

from gateway.services.file_key_service import FileKeyResolver
from gateway.services.local_file_service import LocalFileService
from gateway.services.node_discovery import NodeDiscoveryResolver
from gateway.services.possession_probe import PossessionProbe
from gateway.services.storage_extension_service import StorageExtensionService
from gateway.services.upload_saga import UploadSagaOrchestrator

__all__ = [
    "FileKeyResolver",
    "LocalFileService",
    "NodeDiscoveryResolver",
    "PossessionProbe",
    "StorageExtensionService",
    "UploadSagaOrchestrator",
]
