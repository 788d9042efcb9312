"""HTTP client for the storage network (DDS) API."""

import base64
from typing import Any, Dict

from common.constants import PAYMENT_STATUS_SUCCESS
from common.logging_config import get_logger
from gateway.clients.base import ApiClient
from gateway.exceptions import UpstreamServiceError
from gateway.types import LocalFileRecord, StorageUploadResult

logger = get_logger(__name__)


class StorageNetworkClient(ApiClient):
    """
    Uploads files to the storage network and reports payments for them.
    """

    service_name = "Storage network API"

    async def upload(self, record: LocalFileRecord, data: bytes) -> StorageUploadResult:
        """
        Upload a staged file's bytes together with its descriptive metadata.

        Returns:
            External file id and the price quoted by the storage network
        """
        payload = {
            "name": record.name,
            "extension": record.extension,
            "mime_type": record.mime_type,
            "size": len(data),
            "keep_until": record.keep_until,
            "metadata": record.metadata,
            "data": base64.b64encode(data).decode("ascii"),
        }

        response = await self._request("POST", "/files", json=payload)
        body = self._json(response, self.service_name)

        try:
            file_info = body["data"]
            result = StorageUploadResult(
                dds_id=str(file_info["id"]),
                price=float(file_info["attributes"]["price"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamServiceError(
                f"{self.service_name} returned an unexpected upload response",
                service=self.service_name, body=response.text
            ) from e

        logger.debug(f"Uploaded {len(data)} bytes, assigned storage id {result.dds_id}")
        return result

    async def notify_payment(
        self,
        dds_id: str,
        amount: float,
        status: str = PAYMENT_STATUS_SUCCESS,
    ) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            "/files/notify-payment-status",
            json={"file_id": dds_id, "amount": amount, "status": status},
        )
        return self._json(response, self.service_name) if response.content else {}

    async def extend_duration(self, dds_id: str, duration_seconds: int) -> float:
        """
        Ask the storage network to keep a file for `duration_seconds` more.

        Returns:
            Price of the extension
        """
        response = await self._request("PATCH", f"/files/{dds_id}", json={"duration": duration_seconds})
        body = self._json(response, self.service_name)

        try:
            return float(body["data"]["attributes"]["price"])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamServiceError(
                f"{self.service_name} returned an unexpected extension response",
                service=self.service_name, body=response.text
            ) from e
