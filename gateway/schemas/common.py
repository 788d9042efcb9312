"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel

from common.types import SignedRequest


class SuccessResponse(BaseModel):
    """Acknowledgement of an accepted operation."""
    success: bool


class SignedRequestModel(BaseModel):
    """A message and its signature by the holder of `address`."""
    address: str
    message: str
    signature: str

    def to_signed_request(self) -> SignedRequest:
        return SignedRequest(address=self.address, message=self.message, signature=self.signature)
