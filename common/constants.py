"""Project-wide constants (node types, default ports, timeouts)."""

GATEWAY_PORT: int = 3000

DATA_VALIDATOR_API_SCHEME: str = "http"
DATA_VALIDATOR_API_PREFIX: str = "/api/v1"

HTTP_TIMEOUT_SECONDS: float = 30.0

DEFAULT_TEMPORARY_FILES_DIRECTORY: str = "/app/data/files"

# Fallback retention when a keep_until date cannot be parsed.
DEFAULT_STORAGE_DURATION_SECONDS: int = 30 * 24 * 3600

PAYMENT_STATUS_SUCCESS: str = "success"
