"""Unit tests for collaborator HTTP clients."""

import httpx
import pytest

from common.types import Node, NodeType
from gateway.clients.base import ApiClient
from gateway.clients.data_validator_client import DataValidatorClientFactory
from gateway.clients.discovery_client import DiscoveryClient
from gateway.clients.storage_network_client import StorageNetworkClient
from gateway.exceptions import ErrorKind, UpstreamServiceError


def client_with(handler, cls=ApiClient):
    return cls("http://service.test", transport=httpx.MockTransport(handler))


class TestApiClientErrors:

    @pytest.mark.asyncio
    async def test_error_status_carries_code_and_body(self):
        client = client_with(lambda request: httpx.Response(409, text="duplicate"))

        with pytest.raises(UpstreamServiceError) as exc_info:
            await client._request("GET", "/thing")

        error = exc_info.value
        assert error.kind == ErrorKind.INTERNAL
        assert error.status_code == 409
        assert error.body == "duplicate"
        assert "409" in str(error)

    @pytest.mark.asyncio
    async def test_connection_failure_is_unreachable(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = client_with(refuse)

        with pytest.raises(UpstreamServiceError) as exc_info:
            await client._request("GET", "/thing")

        assert "unreachable" in str(exc_info.value)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_timeout_is_reported(self):
        def slow(request):
            raise httpx.ReadTimeout("too slow", request=request)

        client = client_with(slow)

        with pytest.raises(UpstreamServiceError) as exc_info:
            await client._request("GET", "/thing")

        assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_json_body_is_rejected(self):
        client = client_with(lambda request: httpx.Response(200, text="<html>"))

        response = await client._request("GET", "/thing")
        with pytest.raises(UpstreamServiceError):
            ApiClient._json(response, "test")

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        async with client_with(lambda request: httpx.Response(200, json={})) as client:
            await client._request("GET", "/thing")

        assert client._client.is_closed


class TestStorageNetworkClient:

    @pytest.mark.asyncio
    async def test_extend_duration_returns_price(self):
        def handler(request):
            assert request.method == "PATCH"
            assert request.url.path == "/files/dds-1"
            return httpx.Response(200, json={"data": {"attributes": {"price": "4.25"}}})

        client = client_with(handler, StorageNetworkClient)

        assert await client.extend_duration("dds-1", 3600) == 4.25

    @pytest.mark.asyncio
    async def test_notify_payment_accepts_empty_body(self):
        client = client_with(lambda request: httpx.Response(204), StorageNetworkClient)

        assert await client.notify_payment("dds-1", 1.5) == {}


class TestDiscoveryClient:

    @pytest.mark.asyncio
    async def test_malformed_entries_are_skipped(self):
        def handler(request):
            return httpx.Response(200, json=[
                {"id": "n1", "ipAddress": "10.0.0.1", "port": 80, "address": "a", "type": "DATA_VALIDATOR_NODE"},
                {"id": "broken"},
                {"id": "n2", "ipAddress": "10.0.0.2", "port": "not-a-port", "address": "a", "type": "X"},
            ])

        client = client_with(handler, DiscoveryClient)

        nodes = await client.find_nodes("a", NodeType.DATA_VALIDATOR_NODE.value)

        assert [n.node_id for n in nodes] == ["n1"]

    @pytest.mark.asyncio
    async def test_non_list_response_is_an_error(self):
        client = client_with(lambda request: httpx.Response(200, json={"nodes": []}), DiscoveryClient)

        with pytest.raises(UpstreamServiceError):
            await client.find_nodes("a", NodeType.DATA_VALIDATOR_NODE.value)


class TestDataValidatorClientFactory:

    @pytest.mark.asyncio
    async def test_client_targets_node_endpoint(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(200, json=True)

        factory = DataValidatorClientFactory(transport=httpx.MockTransport(handler))
        node = Node("n1", "192.168.1.20", 9000, "addr", NodeType.DATA_VALIDATOR_NODE.value)

        async with factory.create(node) as client:
            assert await client.has_file("f-1") is True

        assert str(seen[0]) == "http://192.168.1.20:9000/api/v1/files/f-1/check"
