from typing import Any, Dict, List, Optional

import strawberry
from strawberry.types import Info

from ..clients import DownstreamError, add_auth_header, auth_client
from ..envelope import decode, pick_entity, pick_list
from ..errors import relay
from .common import iso_timestamp, normalize_id, require_token, to_payload


@strawberry.type
class Address:
    id: Optional[strawberry.ID]
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    label: Optional[str] = None
    is_default: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Address":
        return cls(
            id=normalize_id(raw),
            street=raw.get("street"),
            city=raw.get("city"),
            state=raw.get("state"),
            zip=raw.get("zip"),
            country=raw.get("country"),
            label=raw.get("label"),
            is_default=bool(raw.get("isDefault")),
            created_at=iso_timestamp(raw.get("createdAt")),
        )


@strawberry.type
class AddressResult:
    success: bool
    message: Optional[str] = None
    address: Optional[Address] = None


@strawberry.input
class AddressInput:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    label: Optional[str] = None
    is_default: Optional[bool] = None


def address_result(body: Any) -> AddressResult:
    envelope = decode(body)
    raw = pick_entity(body, "address", required=False)
    return AddressResult(
        success=envelope.success,
        message=envelope.message,
        address=Address.from_payload(raw) if raw and normalize_id(raw) else None,
    )


@strawberry.type
class AddressQuery:
    @strawberry.field
    async def my_addresses(self, info: Info) -> List[Address]:
        token = require_token(info)
        try:
            resp = await auth_client.get("/api/addresses", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return [Address.from_payload(raw) for raw in pick_list(resp, "addresses")]


@strawberry.type
class AddressMutation:
    @strawberry.mutation
    async def add_address(self, info: Info, input: AddressInput) -> AddressResult:
        token = require_token(info)
        try:
            resp = await auth_client.post("/api/addresses", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return address_result(resp)

    @strawberry.mutation
    async def update_address(self, info: Info, id: strawberry.ID, input: AddressInput) -> AddressResult:
        token = require_token(info)
        try:
            resp = await auth_client.put(f"/api/addresses/{id}", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return address_result(resp)

    @strawberry.mutation
    async def delete_address(self, info: Info, id: strawberry.ID) -> AddressResult:
        token = require_token(info)
        try:
            resp = await auth_client.delete(f"/api/addresses/{id}", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return address_result(resp)

    @strawberry.mutation
    async def set_default_address(self, info: Info, id: strawberry.ID) -> AddressResult:
        token = require_token(info)
        try:
            resp = await auth_client.patch(f"/api/addresses/{id}/default", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return address_result(resp)
