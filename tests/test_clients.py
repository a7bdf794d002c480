"""Tests for the downstream service clients."""

import httpx
import pytest

from gateway.clients import (
    DownstreamError,
    ServiceClient,
    add_auth_header,
    auth_client,
    category_client,
    coupon_client,
    order_client,
    product_client,
)


def test_add_auth_header_with_token():
    assert add_auth_header("abc") == {"headers": {"Authorization": "Bearer abc"}}


def test_add_auth_header_with_empty_token():
    """An empty token still produces a well-formed header."""
    assert add_auth_header("") == {"headers": {"Authorization": "Bearer "}}


@pytest.mark.parametrize("client, port", [
    (auth_client, 3001),
    (category_client, 3002),
    (coupon_client, 3003),
    (order_client, 3004),
    (product_client, 3005),
])
def test_clients_are_preconfigured(client, port):
    assert client.base_url == f"http://localhost:{port}"
    assert client.headers["Content-Type"] == "application/json"


async def test_get_sends_params_and_auth_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["content_type"] = request.headers.get("Content-Type")
        return httpx.Response(200, json={"success": True, "data": {"orders": []}})

    client = ServiceClient("order", "http://orders.test", transport=httpx.MockTransport(handler))
    body = await client.get("/api/orders", params={"page": 2, "search": None}, **add_auth_header("tok"))
    await client.aclose()

    assert body == {"success": True, "data": {"orders": []}}
    assert seen["url"] == "http://orders.test/api/orders?page=2"
    assert seen["auth"] == "Bearer tok"
    assert seen["content_type"] == "application/json"


async def test_non_2xx_carries_downstream_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"success": False, "message": "Sellers only"})

    client = ServiceClient("product", "http://products.test", transport=httpx.MockTransport(handler))
    with pytest.raises(DownstreamError) as excinfo:
        await client.post("/api/products", json={"name": "x"})
    await client.aclose()

    err = excinfo.value
    assert err.status_code == 403
    assert err.payload == {"success": False, "message": "Sellers only"}
    assert err.message == "Sellers only"
    assert not err.is_network_failure


async def test_connection_failure_is_a_downstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ServiceClient("coupon", "http://coupons.test", transport=httpx.MockTransport(handler))
    with pytest.raises(DownstreamError) as excinfo:
        await client.get("/api/coupons")
    await client.aclose()

    assert excinfo.value.is_network_failure
    assert excinfo.value.payload is None


async def test_timeout_is_a_downstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = ServiceClient("auth", "http://auth.test", transport=httpx.MockTransport(handler))
    with pytest.raises(DownstreamError, match="timed out"):
        await client.get("/api/auth/me")
    await client.aclose()


async def test_each_verb_uses_its_method():
    methods = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(204)

    client = ServiceClient("auth", "http://auth.test", transport=httpx.MockTransport(handler))
    assert await client.get("/a") == {}
    await client.post("/a", json={})
    await client.put("/a", json={})
    await client.patch("/a", json={})
    await client.delete("/a")
    await client.aclose()

    assert methods == ["GET", "POST", "PUT", "PATCH", "DELETE"]
