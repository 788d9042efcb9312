"""HTTP client for the billing service."""

from typing import Any, Dict

from common.logging_config import get_logger
from common.types import SignedRequest
from gateway.clients.base import ApiClient
from gateway.exceptions import UpstreamServiceError
from gateway.types import LocalFileRecord, UploadPaymentResult

logger = get_logger(__name__)


class BillingClient(ApiClient):
    """
    Settles upload and storage-extension payments on behalf of data validators.
    """

    service_name = "Billing API"

    async def pay_for_upload(
        self,
        record: LocalFileRecord,
        signed_request: SignedRequest,
        price: float,
        dds_id: str,
    ) -> UploadPaymentResult:
        """
        Charge the record's data validator for an upload.

        Returns:
            Address and private key of the newly provisioned data owner
        """
        payload = {
            "id": dds_id,
            "data_validator": record.data_validator_address,
            "service_node": record.service_node_address,
            "sum": str(price),
            "signature": signed_request.to_dict(),
        }

        response = await self._request("POST", "/files/pay", json=payload)
        body = self._json(response, self.service_name)

        try:
            return UploadPaymentResult(
                owner_address=body["address"],
                private_key=body["privateKey"],
            )
        except (KeyError, TypeError) as e:
            raise UpstreamServiceError(
                f"{self.service_name} returned an unexpected payment response",
                service=self.service_name,
            ) from e

    async def pay_for_extension(
        self,
        amount: float,
        service_node: str,
        data_validator: str,
        signed_request: SignedRequest,
    ) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            "/files/extend-storage",
            json={
                "sum": str(amount),
                "serviceNode": service_node,
                "dataValidator": data_validator,
                "signature": signed_request.to_dict(),
            },
        )
        logger.debug(f"Paid {amount} for storage extension on behalf of {data_validator}")
        return self._json(response, self.service_name) if response.content else {}
