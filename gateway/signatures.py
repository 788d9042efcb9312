"""Verification of signed requests against account addresses."""

from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives import serialization

from common.logging_config import get_logger
from common.types import SignedRequest

logger = get_logger(__name__)


def _strip_hex_prefix(value: str) -> str:
    return value[2:] if value.lower().startswith("0x") else value


def normalize_address(address: str) -> str:
    """
    Canonical form of an address: lowercase hex without 0x prefix.
    """
    return _strip_hex_prefix(address.strip()).lower()


class SignatureVerifier:
    """
    Checks that a SignedRequest was produced by the holder of an address.

    An address is the hex-encoded raw Ed25519 public key of the account; the
    signature is the hex-encoded Ed25519 signature of the UTF-8 message.
    """

    def is_valid(self, address: str, signed_request: SignedRequest) -> bool:
        """
        Returns:
            True only if the request claims `address` and its signature
            verifies against that address. Malformed input yields False.
        """
        if not address or signed_request is None:
            return False

        if normalize_address(signed_request.address) != normalize_address(address):
            logger.debug(f"Signed request claims {signed_request.address}, expected {address}")
            return False

        try:
            public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(normalize_address(address)))
            signature = bytes.fromhex(_strip_hex_prefix(signed_request.signature.strip()))
            public_key.verify(signature, signed_request.message.encode("utf-8"))
            return True
        except InvalidSignature:
            logger.debug(f"Signature does not verify for address {address}")
            return False
        except (ValueError, TypeError, AttributeError) as e:
            logger.debug(f"Malformed signed request for address {address}: {e}")
            return False


class RequestSigner:
    """
    Produces SignedRequests with an Ed25519 key. Used by clients and tests to
    build requests the gateway accepts.
    """

    def __init__(self, private_key: Optional[Ed25519PrivateKey] = None):
        self.private_key = private_key or Ed25519PrivateKey.generate()

    @property
    def address(self) -> str:
        raw = self.private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw
        )
        return raw.hex()

    def sign(self, message: str) -> SignedRequest:
        signature = self.private_key.sign(message.encode("utf-8"))
        return SignedRequest(address=self.address, message=message, signature=signature.hex())
