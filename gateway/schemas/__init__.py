"""Pydantic schemas for API requests and responses."""

from gateway.schemas.common import SignedRequestModel, SuccessResponse
from gateway.schemas.files import (
    CreateLocalFileRequest,
    ExtendStorageDurationRequest,
    FileInfoResponse,
    LocalFileRecordResponse,
    StageEventResponse,
    StageEventsResponse,
    UploadLocalFileRequest,
    UploadStatusResponse,
)

__all__ = [
    "CreateLocalFileRequest",
    "ExtendStorageDurationRequest",
    "FileInfoResponse",
    "LocalFileRecordResponse",
    "SignedRequestModel",
    "StageEventResponse",
    "StageEventsResponse",
    "SuccessResponse",
    "UploadLocalFileRequest",
    "UploadStatusResponse",
]
