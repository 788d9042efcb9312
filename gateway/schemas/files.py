"""Pydantic schemas for file operation endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from gateway.schemas.common import SignedRequestModel
from gateway.types import LocalFileRecord, StageEvent, UploadStatus


class CreateLocalFileRequest(BaseModel):
    """Request model for staging a new local file."""
    name: str
    extension: str
    mime_type: str
    data_validator_address: str
    keep_until: str
    price: float = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)


class LocalFileRecordResponse(BaseModel):
    """Response model for a staged local file."""
    id: str
    name: str
    extension: str
    mime_type: str
    size: int
    metadata: Dict[str, Any]
    service_node_address: str
    data_validator_address: str
    keep_until: str
    price: float
    stage: str
    deleted_locally: bool

    @classmethod
    def from_record(cls, record: LocalFileRecord) -> "LocalFileRecordResponse":
        return cls(
            id=record.record_id,
            name=record.name,
            extension=record.extension,
            mime_type=record.mime_type,
            size=record.size,
            metadata=record.metadata,
            service_node_address=record.service_node_address,
            data_validator_address=record.data_validator_address,
            keep_until=record.keep_until,
            price=record.price,
            stage=record.stage.value,
            deleted_locally=record.deleted_locally,
        )


class UploadLocalFileRequest(BaseModel):
    """Request model for submitting a local file to the storage network."""
    signature: SignedRequestModel


class UploadStatusResponse(BaseModel):
    """Response model for polling upload progress."""
    fully_uploaded: bool
    failed: bool
    stage: str
    price: float
    dds_file_id: Optional[str] = None
    storage_price: Optional[float] = None
    data_owner: Optional[str] = None
    private_key: Optional[str] = None

    @classmethod
    def from_status(cls, status: UploadStatus) -> "UploadStatusResponse":
        return cls(
            fully_uploaded=status.fully_uploaded,
            failed=status.failed,
            stage=status.stage.value,
            price=status.price,
            dds_file_id=status.dds_file_id,
            storage_price=status.storage_price,
            data_owner=status.data_owner,
            private_key=status.private_key,
        )


class StageEventResponse(BaseModel):
    """One entry of an upload saga trace."""
    stage: str
    status: str
    created_at: str
    detail: Optional[str] = None

    @classmethod
    def from_event(cls, event: StageEvent) -> "StageEventResponse":
        return cls(
            stage=event.stage.value,
            status=event.status.value,
            created_at=event.created_at,
            detail=event.detail,
        )


class StageEventsResponse(BaseModel):
    """Response model for an upload saga trace."""
    record_id: str
    events: List[StageEventResponse]


class FileInfoResponse(BaseModel):
    """Response model for a file uploaded to the storage network."""
    id: str
    name: str
    metadata: Dict[str, Any]
    data_validator: str
    data_owner: Optional[str] = None
    service_node: str
    keep_until: str
    extension: str
    mime_type: str
    size: int
    price: float

    @classmethod
    def from_record(cls, record: LocalFileRecord) -> "FileInfoResponse":
        return cls(
            id=record.dds_id,
            name=record.name,
            metadata=record.metadata,
            data_validator=record.data_validator_address,
            data_owner=record.data_owner_address,
            service_node=record.service_node_address,
            keep_until=record.keep_until,
            extension=record.extension,
            mime_type=record.mime_type,
            size=record.size,
            price=record.price,
        )


class ExtendStorageDurationRequest(BaseModel):
    """Request model for extending how long a file is stored."""
    keep_until: str
    signature: SignedRequestModel
