"""HTTP clients for the downstream REST services.

One ``ServiceClient`` per backend. Every call returns the decoded JSON body
or raises ``DownstreamError``; nothing is retried or cached.
"""
from typing import Any, Dict, Optional

import httpx

from shared.core import get_logger

from .core_settings import get_settings

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "
JSON_HEADERS = {"Content-Type": "application/json"}


class DownstreamError(Exception):
    """A downstream call failed at the network level or answered non-2xx."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.service = service
        self.status_code = status_code
        self.payload = payload

    @property
    def message(self) -> str:
        if isinstance(self.payload, dict):
            for key in ("message", "error"):
                value = self.payload.get(key)
                if isinstance(value, str) and value:
                    return value
        return str(self)

    @property
    def is_network_failure(self) -> bool:
        return self.status_code is None


def add_auth_header(token: str) -> Dict[str, Dict[str, str]]:
    """Request options carrying the caller's bearer token, even when empty."""
    return {"headers": {"Authorization": f"{BEARER_PREFIX}{token}"}}


class ServiceClient:
    def __init__(self, name: str, base_url: str, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else get_settings().REQUEST_TIMEOUT
        self.headers = dict(JSON_HEADERS)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def request(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
                      json: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        try:
            resp = await self.client.request(method, path, params=params or None, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"{self.name} service timed out: {method} {path}")
            raise DownstreamError(self.name, f"{self.name} service timed out") from e
        except httpx.RequestError as e:
            logger.warning(f"{self.name} service unreachable: {method} {path}: {e}")
            raise DownstreamError(self.name, f"{self.name} service unavailable") from e

        payload = _decode_body(resp)
        if resp.status_code >= 400:
            logger.warning(f"{self.name} service answered {resp.status_code}: {method} {path}")
            raise DownstreamError(
                self.name,
                f"{self.name} service error {resp.status_code}",
                status_code=resp.status_code,
                payload=payload,
            )
        logger.debug(f"{self.name} {method} {path} -> {resp.status_code}")
        return payload

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)


def _decode_body(resp: httpx.Response) -> Any:
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError:
        return {"message": resp.text}


_settings = get_settings()

auth_client = ServiceClient("auth", _settings.AUTH_SERVICE_URL)
product_client = ServiceClient("product", _settings.PRODUCT_SERVICE_URL)
order_client = ServiceClient("order", _settings.ORDER_SERVICE_URL)
category_client = ServiceClient("category", _settings.CATEGORY_SERVICE_URL)
coupon_client = ServiceClient("coupon", _settings.COUPON_SERVICE_URL)

ALL_CLIENTS = (auth_client, product_client, order_client, category_client, coupon_client)


async def close_clients() -> None:
    for client in ALL_CLIENTS:
        await client.aclose()
