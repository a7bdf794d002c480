"""Tests for cross-service health aggregation."""

import httpx
import pytest

from gateway.core_settings import ServiceEndpoint
from gateway.health import HealthAggregator, ServiceNotFound

REGISTRY = {
    name: ServiceEndpoint(name, f"http://{name}.test")
    for name in ("auth", "category", "coupon", "order", "product", "ticket")
}


def aggregator_for(handler):
    return HealthAggregator(REGISTRY, timeout=5.0, transport=httpx.MockTransport(handler),
                            gateway_url="http://gateway.test")


def healthy_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"status": "ok", "uptime": 12.5}, headers={"x-response-time": "3ms"})


async def test_all_healthy():
    result = await aggregator_for(healthy_handler).check_all()

    assert result.overallStatus == "healthy"
    assert result.totalServices == len(REGISTRY) + 1
    assert result.healthyCount == len(REGISTRY) + 1
    assert [record.name for record in result.services][-1] == "gateway"
    auth = result.services[0]
    assert auth.url == "http://auth.test"
    assert auth.responseTime == "3ms"
    assert auth.uptime == 12.5


@pytest.mark.parametrize("failing", [{"order"}, {"auth", "ticket"}, set(REGISTRY)])
async def test_any_failure_degrades(failing):
    def handler(request: httpx.Request) -> httpx.Response:
        name = request.url.host.split(".")[0]
        if name in failing:
            raise httpx.ConnectError("connection refused", request=request)
        return healthy_handler(request)

    result = await aggregator_for(handler).check_all()

    assert result.overallStatus == "degraded"
    assert len(result.services) == len(REGISTRY) + 1
    assert result.healthyCount == len(REGISTRY) + 1 - len(failing)
    unhealthy = {record.name for record in result.services if record.status == "unhealthy"}
    assert unhealthy == failing
    gateway = result.services[-1]
    assert gateway.name == "gateway" and gateway.status == "healthy"


async def test_non_200_is_unhealthy_with_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "coupon.test":
            return httpx.Response(503, json={"status": "down", "db": "disconnected"})
        return healthy_handler(request)

    result = await aggregator_for(handler).check_all()

    coupon = next(record for record in result.services if record.name == "coupon")
    assert coupon.status == "unhealthy"
    assert coupon.error == {"status": "down", "db": "disconnected"}


async def test_timeout_only_fails_its_own_record():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "product.test":
            raise httpx.ReadTimeout("timed out", request=request)
        return healthy_handler(request)

    result = await aggregator_for(handler).check_all()

    statuses = {record.name: record.status for record in result.services}
    assert statuses.pop("product") == "unhealthy"
    assert set(statuses.values()) == {"healthy"}


async def test_check_one_unknown_service():
    with pytest.raises(ServiceNotFound) as excinfo:
        await aggregator_for(healthy_handler).check_one("inventory")
    assert str(excinfo.value) == 'Service "inventory" not found'
    assert excinfo.value.available == list(REGISTRY)


async def test_check_one_known_service():
    record = await aggregator_for(healthy_handler).check_one("ticket")
    assert record.status == "healthy"
    assert record.details == {"status": "ok", "uptime": 12.5}
