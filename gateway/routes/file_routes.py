"""File operation API routes."""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response, status

from common.types import SignedRequest
from gateway.schemas.common import SuccessResponse
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
from gateway.service_locator import (
    get_file_key_resolver,
    get_local_file_service,
    get_storage_extension_service,
    get_upload_saga,
)
from gateway.services.file_key_service import FileKeyResolver
from gateway.services.local_file_service import LocalFileService
from gateway.services.storage_extension_service import StorageExtensionService
from gateway.services.upload_saga import UploadSagaOrchestrator
from gateway.types import FileKeyRequest

router = APIRouter(prefix="/api/v1/files", tags=["Files"])


@router.post("/local", response_model=LocalFileRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_local_file(
    request: CreateLocalFileRequest,
    local_files: LocalFileService = Depends(get_local_file_service),
):
    """
    Stage a new, empty local file.

    Returns:
        - The created record, including its generated id

    Raises:
        - 422: Malformed request body
    """
    record = local_files.create_local_file_record(
        name=request.name,
        extension=request.extension,
        mime_type=request.mime_type,
        data_validator_address=request.data_validator_address,
        keep_until=request.keep_until,
        price=request.price,
        metadata=request.metadata,
    )
    return LocalFileRecordResponse.from_record(record)


@router.post("/local/{local_file_id}/chunk", response_model=SuccessResponse)
async def upload_file_chunk(
    local_file_id: str,
    request: Request,
    local_files: LocalFileService = Depends(get_local_file_service),
):
    """
    Append the raw request body to a staged file.

    Raises:
        - 404: Local file not found
        - 409: Local file already deleted
    """
    chunk = await request.body()
    return await local_files.write_file_chunk(local_file_id, chunk)


@router.delete("/local/{local_file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_local_file(
    local_file_id: str,
    local_files: LocalFileService = Depends(get_local_file_service),
):
    """
    Delete a staged file's bytes, keeping its record.

    Raises:
        - 404: Local file not found
        - 409: Local file already deleted
    """
    await local_files.delete_local_file(local_file_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/local/{local_file_id}/to-dds", response_model=SuccessResponse, status_code=status.HTTP_202_ACCEPTED)
async def upload_local_file_to_dds(
    local_file_id: str,
    request: UploadLocalFileRequest,
    upload_saga: UploadSagaOrchestrator = Depends(get_upload_saga),
):
    """
    Start uploading a staged file to the storage network.

    The upload runs in the background; poll /is-fully-uploaded for the outcome.

    Raises:
        - 403: Signature does not match the file's data validator
        - 404: Local file not found
        - 409: Upload already running or finished
    """
    return await upload_saga.submit(local_file_id, request.signature.to_signed_request())


@router.get("/local/{local_file_id}/is-fully-uploaded", response_model=UploadStatusResponse)
async def check_local_file_upload_status(
    local_file_id: str,
    local_files: LocalFileService = Depends(get_local_file_service),
):
    """
    Report upload progress of a staged file.

    Raises:
        - 404: Local file not found
    """
    return UploadStatusResponse.from_status(local_files.get_upload_status(local_file_id))


@router.get("/local/{local_file_id}/events", response_model=StageEventsResponse)
async def list_upload_events(
    local_file_id: str,
    local_files: LocalFileService = Depends(get_local_file_service),
):
    """
    List the upload saga trace of a staged file, oldest first.

    Raises:
        - 404: Local file not found
    """
    events = local_files.list_stage_events(local_file_id)
    return StageEventsResponse(
        record_id=local_file_id,
        events=[StageEventResponse.from_event(event) for event in events],
    )


@router.get("/{file_id}/info", response_model=FileInfoResponse)
async def get_file_info(
    file_id: str,
    local_files: LocalFileService = Depends(get_local_file_service),
):
    """
    Describe a file uploaded through this gateway, by storage network id.

    Raises:
        - 404: File not found
    """
    return FileInfoResponse.from_record(local_files.get_file_info(file_id))


@router.get("/{file_id}/key")
async def get_file_key(
    file_id: str,
    address: str = Query(...),
    message: str = Query(...),
    signature: str = Query(...),
    data_validator_address: str = Query(...),
    file_keys: FileKeyResolver = Depends(get_file_key_resolver),
) -> Any:
    """
    Fetch a file's key from the data validator node that holds the file.

    Returns:
        - The key payload exactly as returned by the node

    Raises:
        - 403: Signature is invalid
        - 404: No data validator node registered for the address
        - 500: Holding node failed to return the key
        - 503: No node possesses the file
    """
    key_request = FileKeyRequest(
        signed_request=SignedRequest(address=address, message=message, signature=signature),
        data_validator_address=data_validator_address,
    )
    return await file_keys.get_file_key(file_id, key_request)


@router.patch("/{file_id}", response_model=SuccessResponse)
async def extend_file_storage_duration(
    file_id: str,
    request: ExtendStorageDurationRequest,
    extensions: StorageExtensionService = Depends(get_storage_extension_service),
):
    """
    Keep a file on the storage network until a later date.

    Raises:
        - 403: Signature does not match the file's data validator
        - 404: File not found
        - 409: File has not completed its upload
        - 500: Storage network or billing service failure
    """
    return await extensions.extend_storage_duration(
        file_id, request.keep_until, request.signature.to_signed_request()
    )
