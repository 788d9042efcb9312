"""Shared pytest fixtures for all tests."""

import json
from pathlib import Path
from typing import Any, Dict, List

import httpx
import pytest

from gateway.clients.billing_client import BillingClient
from gateway.clients.data_validator_client import DataValidatorClientFactory
from gateway.clients.discovery_client import DiscoveryClient
from gateway.clients.storage_network_client import StorageNetworkClient
from gateway.database import init_database
from gateway.record_locks import RecordLockRegistry
from gateway.services.local_file_service import LocalFileService
from gateway.signatures import RequestSigner

STORAGE_URL = "http://storage.test"
BILLING_URL = "http://billing.test"
DISCOVERY_URL = "http://discovery.test"
SERVICE_NODE_ADDRESS = "service-node-address"


class FakeNetwork:
    """
    In-memory stand-in for the storage network, billing service, discovery
    directory and data validator nodes, routed by request host.

    Responses can be replaced per test; a callable response is invoked with
    the request, so it may raise httpx errors to simulate transport failures.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.upload_response: Any = httpx.Response(
            200, json={"data": {"id": "dds-file-1", "attributes": {"price": 12.5}}}
        )
        self.pay_response: Any = httpx.Response(
            200, json={"address": "owner-address-1", "privateKey": "owner-private-key-1"}
        )
        self.notify_response: Any = httpx.Response(200, json={"status": "ok"})
        self.extend_response: Any = httpx.Response(
            200, json={"data": {"attributes": {"price": 3.0}}}
        )
        self.extension_payment_response: Any = httpx.Response(200, json={"status": "ok"})
        self.nodes: List[Dict[str, Any]] = []
        self.possession: Dict[str, Any] = {}
        self.key_responses: Dict[str, Any] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def add_node(self, node_id: str, ip_address: str, address: str, has_file: Any = False, port: int = 8080):
        self.nodes.append({
            "id": node_id,
            "ipAddress": ip_address,
            "port": port,
            "address": address,
            "type": "DATA_VALIDATOR_NODE",
        })
        self.possession[ip_address] = has_file

    def requests_to(self, host: str, path_suffix: str = "") -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.host == host and r.url.path.endswith(path_suffix)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path

        if host == "storage.test":
            if request.method == "POST" and path == "/files":
                return self._respond(self.upload_response, request)
            if path == "/files/notify-payment-status":
                return self._respond(self.notify_response, request)
            if request.method == "PATCH":
                return self._respond(self.extend_response, request)

        if host == "billing.test":
            if path == "/files/pay":
                return self._respond(self.pay_response, request)
            if path == "/files/extend-storage":
                return self._respond(self.extension_payment_response, request)

        if host == "discovery.test" and path == "/api/v1/discovery/nodes":
            address = request.url.params.get("address")
            matching = [n for n in self.nodes if n["address"] == address]
            return httpx.Response(200, json=matching)

        if host in self.possession:
            if path.endswith("/check"):
                return self._respond(self._possession_response(host), request)
            if path.endswith("/key"):
                return self._respond(
                    self.key_responses.get(host, httpx.Response(200, json={"key": f"key-from-{host}"})),
                    request,
                )

        return httpx.Response(404, json={"detail": "not found"})

    @staticmethod
    def sent_json(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)

    def _possession_response(self, host: str) -> Any:
        answer = self.possession[host]
        if isinstance(answer, bool):
            return httpx.Response(200, json=answer)
        return answer

    @staticmethod
    def _respond(response: Any, request: httpx.Request) -> httpx.Response:
        if callable(response):
            return response(request)
        return httpx.Response(response.status_code, headers=response.headers, content=response.content)


@pytest.fixture
def test_db(monkeypatch, tmp_path) -> Path:
    """
    Create a temporary test database for each test.
    """
    db_path = tmp_path / "test.db"
    monkeypatch.setattr("gateway.database.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("gateway.config.DATABASE_PATH", str(db_path))
    init_database()
    return db_path


@pytest.fixture
def files_dir(tmp_path) -> Path:
    """
    Temporary staging directory for local file bytes.
    """
    directory = tmp_path / "files"
    directory.mkdir()
    return directory


@pytest.fixture
def locks() -> RecordLockRegistry:
    return RecordLockRegistry()


@pytest.fixture
def validator_signer() -> RequestSigner:
    """
    Key pair of the data validator that pays for uploads.
    """
    return RequestSigner()


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def storage_client(network) -> StorageNetworkClient:
    return StorageNetworkClient(STORAGE_URL, transport=network.transport)


@pytest.fixture
def billing_client(network) -> BillingClient:
    return BillingClient(BILLING_URL, transport=network.transport)


@pytest.fixture
def discovery_client(network) -> DiscoveryClient:
    return DiscoveryClient(DISCOVERY_URL, transport=network.transport)


@pytest.fixture
def validator_factory(network) -> DataValidatorClientFactory:
    return DataValidatorClientFactory(transport=network.transport)


@pytest.fixture
def local_file_service(test_db, files_dir, locks) -> LocalFileService:
    return LocalFileService(locks, files_directory=str(files_dir), service_node_address=SERVICE_NODE_ADDRESS)


@pytest.fixture
def make_record(local_file_service, validator_signer):
    """
    Factory creating a staged local file record addressed to the validator.
    """
    def _make(name: str = "report.pdf", **overrides):
        params = {
            "name": name,
            "extension": "pdf",
            "mime_type": "application/pdf",
            "data_validator_address": validator_signer.address,
            "keep_until": "2030-01-01T00:00:00Z",
            "price": 10.0,
            "metadata": {"author": "alice", "hashTags": ["reports"]},
        }
        params.update(overrides)
        return local_file_service.create_local_file_record(**params)

    return _make
