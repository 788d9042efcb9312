"""Shared data type definitions (Node, SignedRequest, NodeType)."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class NodeType(str, Enum):
    """
    Node roles known to the discovery directory.
    """
    DATA_VALIDATOR_NODE = "DATA_VALIDATOR_NODE"
    SERVICE_NODE = "SERVICE_NODE"
    DATA_MART_NODE = "DATA_MART_NODE"


@dataclass(frozen=True)
class Node:
    """
    A network node endpoint returned by the discovery directory.
    Only held for the duration of one resolution.
    """
    node_id: str
    ip_address: str
    port: int
    address: str
    node_type: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        return cls(
            node_id=str(data["id"]),
            ip_address=data["ipAddress"],
            port=int(data["port"]),
            address=data["address"],
            node_type=data["type"],
        )


@dataclass(frozen=True)
class SignedRequest:
    """
    A message signed by the holder of `address`.
    """
    address: str
    message: str
    signature: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "address": self.address,
            "message": self.message,
            "signature": self.signature,
        }
