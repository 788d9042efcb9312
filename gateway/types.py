"""Gateway-specific data type definitions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from common.types import SignedRequest


class UploadStage(str, Enum):
    """
    Persisted position of a record in the upload saga.
    """
    PENDING = "PENDING"
    UPLOADING = "UPLOADING"
    PAYING = "PAYING"
    NOTIFYING = "NOTIFYING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


class StageEventStatus(str, Enum):
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class LocalFileRecord:
    """
    Bookkeeping entity for a file staged on this gateway.
    """
    record_id: Optional[str]
    name: str
    local_path: str
    extension: str
    mime_type: str
    service_node_address: str
    data_validator_address: str
    keep_until: str
    price: float = 0
    size: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)
    data_owner_address: Optional[str] = None
    private_key: Optional[str] = None
    uploaded_to_dds: bool = False
    failed: bool = False
    dds_id: Optional[str] = None
    storage_price: Optional[float] = None
    deleted_locally: bool = False
    stage: UploadStage = UploadStage.PENDING
    failed_stage: Optional[UploadStage] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def check_invariants(self) -> None:
        """
        Raise ValueError if the record is in a state that must never be persisted.
        """
        if self.uploaded_to_dds:
            missing = [
                name for name in ("dds_id", "storage_price", "data_owner_address", "private_key")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(
                    f"Record {self.record_id} marked uploaded but missing {', '.join(missing)}"
                )
            if self.failed:
                raise ValueError(f"Record {self.record_id} cannot be both uploaded and failed")


@dataclass(frozen=True)
class StageEvent:
    """
    One step of the upload saga trace.
    """
    event_id: str
    record_id: str
    stage: UploadStage
    status: StageEventStatus
    created_at: str
    detail: Optional[str] = None


@dataclass(frozen=True)
class StorageUploadResult:
    dds_id: str
    price: float


@dataclass(frozen=True)
class UploadPaymentResult:
    owner_address: str
    private_key: str


@dataclass(frozen=True)
class UploadStatus:
    """
    Snapshot of a record's upload progress, for polling callers.
    """
    record_id: str
    fully_uploaded: bool
    failed: bool
    stage: UploadStage
    price: float
    dds_file_id: Optional[str] = None
    storage_price: Optional[float] = None
    data_owner: Optional[str] = None
    private_key: Optional[str] = None


@dataclass(frozen=True)
class FileKeyRequest:
    """
    A signed request for a file's key, addressed to a data validator.
    """
    signed_request: SignedRequest
    data_validator_address: str

    def to_query_params(self) -> Dict[str, str]:
        params = self.signed_request.to_dict()
        params["data_validator_address"] = self.data_validator_address
        return params
