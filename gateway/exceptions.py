"""Custom exception classes for the gateway."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """
    Category of a gateway failure. Callers branch on the kind rather than on
    the concrete exception class.
    """
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    SERVICE_UNAVAILABLE = "service_unavailable"
    INTERNAL = "internal"
    VALIDATION = "validation"


class GatewayException(Exception):
    """
    Base exception class for all gateway errors.
    """
    kind: ErrorKind = ErrorKind.INTERNAL
    code: str = "INTERNAL_ERROR"


class LocalFileNotFoundError(GatewayException):
    """
    Raised when a local file record does not exist.
    """
    kind = ErrorKind.NOT_FOUND
    code = "LOCAL_FILE_NOT_FOUND"


class StorageFileNotFoundError(GatewayException):
    """
    Raised when no local record references the given storage network file id.
    """
    kind = ErrorKind.NOT_FOUND
    code = "FILE_NOT_FOUND"


class LocalFileAlreadyDeletedError(GatewayException):
    """
    Raised when deleting a local file that has already been deleted.
    """
    kind = ErrorKind.CONFLICT
    code = "LOCAL_FILE_ALREADY_DELETED"


class UploadNotAllowedError(GatewayException):
    """
    Raised when a record cannot be submitted for upload in its current state.
    """
    kind = ErrorKind.CONFLICT
    code = "UPLOAD_NOT_ALLOWED"


class ExtensionNotAllowedError(GatewayException):
    """
    Raised when extending storage of a file whose upload never completed.
    """
    kind = ErrorKind.CONFLICT
    code = "EXTENSION_NOT_ALLOWED"


class InvalidSignatureError(GatewayException):
    """
    Raised when a signed request does not verify against the expected address.
    """
    kind = ErrorKind.FORBIDDEN
    code = "INVALID_SIGNATURE"


class ValidatorNodeNotFoundError(GatewayException):
    """
    Raised when discovery returns no data validator node for an address.
    """
    kind = ErrorKind.NOT_FOUND
    code = "VALIDATOR_NODE_NOT_FOUND"


class NoNodePossessesFileError(GatewayException):
    """
    Raised when every candidate node denies (or fails to confirm) holding a file.
    """
    kind = ErrorKind.SERVICE_UNAVAILABLE
    code = "NO_NODE_POSSESSES_FILE"


class FileKeyRetrievalError(GatewayException):
    """
    Raised when the holding node fails to return a file key.
    """
    kind = ErrorKind.INTERNAL
    code = "FILE_KEY_RETRIEVAL_FAILED"

    def __init__(self, message: str, file_id: str):
        super().__init__(message)
        self.file_id = file_id


class UpstreamServiceError(GatewayException):
    """
    Raised when a collaborator service is unreachable or responds with an error.
    """
    kind = ErrorKind.INTERNAL
    code = "UPSTREAM_SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        service: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.service = service
        self.status_code = status_code
        self.body = body
