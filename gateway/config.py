"""Configuration settings for the service node gateway."""

import os
from common.constants import (
    DEFAULT_TEMPORARY_FILES_DIRECTORY,
    GATEWAY_PORT as DEFAULT_GATEWAY_PORT,
    HTTP_TIMEOUT_SECONDS as DEFAULT_HTTP_TIMEOUT_SECONDS,
)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_PATH = os.environ.get("GATEWAY_DATABASE_PATH", "/app/data/service-node.db")

TEMPORARY_FILES_DIRECTORY = os.environ.get("TEMPORARY_FILES_DIRECTORY", DEFAULT_TEMPORARY_FILES_DIRECTORY)

GATEWAY_HOST = os.environ.get("GATEWAY_HOST", "0.0.0.0")

GATEWAY_PORT = int(os.environ.get("SERVICE_NODE_API_PORT", str(DEFAULT_GATEWAY_PORT)))

SERVICE_NODE_ADDRESS = os.environ.get("SERVICE_NODE_ADDRESS", "")

STORAGE_API_BASE_URL = os.environ.get("DDS_API_BASE_URL", "http://localhost:8080")

BILLING_API_BASE_URL = os.environ.get("BILLING_API_BASE_URL", "http://localhost:8081")

DISCOVERY_API_BASE_URL = os.environ.get("DISCOVERY_API_BASE_URL", "http://localhost:8082")

HTTP_TIMEOUT_SECONDS = float(os.environ.get("HTTP_TIMEOUT_SECONDS", str(DEFAULT_HTTP_TIMEOUT_SECONDS)))

# When disabled the NOTIFYING stage is recorded as skipped.
NOTIFY_PAYMENT_STATUS = _env_flag("NOTIFY_PAYMENT_STATUS", "true")
