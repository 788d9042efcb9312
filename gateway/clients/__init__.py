"""HTTP clients for collaborator services."""

from gateway.clients.billing_client import BillingClient
from gateway.clients.data_validator_client import DataValidatorClient, DataValidatorClientFactory
from gateway.clients.discovery_client import DiscoveryClient
from gateway.clients.storage_network_client import StorageNetworkClient

__all__ = [
    "BillingClient",
    "DataValidatorClient",
    "DataValidatorClientFactory",
    "DiscoveryClient",
    "StorageNetworkClient",
]
