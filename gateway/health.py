"""Cross-service health aggregation.

Every registered service is probed at ``<base_url>/health`` concurrently with
a bounded timeout. A slow or failing service only fails its own record; the
verdict is computed once every probe has settled.
"""
import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import httpx
from pydantic import BaseModel

from shared.core import get_logger

from .core_settings import ServiceEndpoint, get_settings, service_registry

logger = get_logger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
DEGRADED = "degraded"
GATEWAY_NAME = "gateway"
PROCESS_START = time.time()


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def process_uptime() -> float:
    return round(time.time() - PROCESS_START, 3)


class HealthRecord(BaseModel):
    name: str
    status: str
    url: str
    timestamp: str
    responseTime: Optional[str] = None
    uptime: Optional[float] = None
    details: Optional[Any] = None
    error: Optional[Any] = None

    @property
    def healthy(self) -> bool:
        return self.status == HEALTHY


class AggregateHealth(BaseModel):
    success: bool = True
    overallStatus: str
    services: List[HealthRecord]
    totalServices: int
    healthyCount: int
    timestamp: str


class ServiceNotFound(LookupError):
    def __init__(self, name: str, available: List[str]):
        super().__init__(f'Service "{name}" not found')
        self.name = name
        self.available = available


def _error_detail(resp: Optional[httpx.Response], exc: Optional[Exception]) -> Any:
    if resp is not None:
        try:
            body = resp.json()
        except ValueError:
            body = resp.text
        return body or f"HTTP {resp.status_code}"
    if exc is not None:
        return str(exc) or type(exc).__name__
    return "Unknown error"


class HealthAggregator:
    def __init__(self, registry: Optional[Mapping[str, ServiceEndpoint]] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None, gateway_url: Optional[str] = None):
        settings = get_settings()
        self.registry = registry if registry is not None else service_registry(settings)
        self.timeout = timeout if timeout is not None else settings.HEALTH_CHECK_TIMEOUT
        self.gateway_url = gateway_url or settings.GRAPHQL_GATEWAY_URL
        self._transport = transport

    @property
    def service_names(self) -> List[str]:
        return list(self.registry)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def probe(self, client: httpx.AsyncClient, endpoint: ServiceEndpoint) -> HealthRecord:
        url = f"{endpoint.base_url.rstrip('/')}/health"
        start_time = time.time()
        resp = None
        try:
            resp = await client.get(url)
        except Exception as e:
            logger.warning(f"Health check failed for {endpoint.name}: {e!r}")
            return HealthRecord(
                name=endpoint.name,
                status=UNHEALTHY,
                url=endpoint.base_url,
                timestamp=utc_timestamp(),
                error=_error_detail(None, e),
            )
        response_time = (time.time() - start_time) * 1000
        details = _json_or_none(resp)
        if resp.status_code != 200:
            logger.warning(f"Health check for {endpoint.name} answered {resp.status_code}")
            return HealthRecord(
                name=endpoint.name,
                status=UNHEALTHY,
                url=endpoint.base_url,
                timestamp=utc_timestamp(),
                responseTime=f"{response_time:.2f}ms",
                error=_error_detail(resp, None),
            )
        uptime = details.get("uptime") if isinstance(details, dict) else None
        return HealthRecord(
            name=endpoint.name,
            status=HEALTHY,
            url=endpoint.base_url,
            timestamp=utc_timestamp(),
            responseTime=resp.headers.get("x-response-time") or f"{response_time:.2f}ms",
            uptime=uptime if isinstance(uptime, (int, float)) else None,
            details=details,
        )

    def gateway_record(self) -> HealthRecord:
        return HealthRecord(
            name=GATEWAY_NAME,
            status=HEALTHY,
            url=self.gateway_url,
            timestamp=utc_timestamp(),
            uptime=process_uptime(),
        )

    async def check_all(self) -> AggregateHealth:
        async with self._client() as client:
            records = list(await asyncio.gather(
                *(self.probe(client, endpoint) for endpoint in self.registry.values())
            ))
        records.append(self.gateway_record())
        healthy_count = sum(1 for record in records if record.healthy)
        return AggregateHealth(
            overallStatus=HEALTHY if healthy_count == len(records) else DEGRADED,
            services=records,
            totalServices=len(records),
            healthyCount=healthy_count,
            timestamp=utc_timestamp(),
        )

    async def check_one(self, name: str) -> HealthRecord:
        endpoint = self.registry.get(name)
        if endpoint is None:
            raise ServiceNotFound(name, self.service_names)
        async with self._client() as client:
            return await self.probe(client, endpoint)


def _json_or_none(resp: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None
