from typing import Any, Dict, List, Optional

import strawberry
from strawberry.types import Info

from shared.core import get_logger

from ..clients import DownstreamError, add_auth_header, coupon_client
from ..envelope import data_mapping, decode, pick_entity, pick_list
from ..errors import downstream_message, relay
from .common import Pagination, iso_timestamp, normalize_id, now_iso, require_token, to_float, to_int, to_payload

logger = get_logger(__name__)


@strawberry.type
class Coupon:
    id: Optional[strawberry.ID]
    code: str
    description: Optional[str] = None
    discount_type: Optional[str] = None
    discount: float = 0.0
    min_purchase: Optional[float] = None
    max_discount: Optional[float] = None
    valid_from: str = ""
    valid_to: str = ""
    usage_limit: Optional[int] = None
    usage_count: int = 0
    is_active: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Coupon":
        return cls(
            id=normalize_id(raw),
            code=raw.get("code") or "",
            description=raw.get("description"),
            discount_type=raw.get("discountType"),
            discount=to_float(raw.get("discount")),
            min_purchase=raw.get("minPurchase"),
            max_discount=raw.get("maxDiscount"),
            valid_from=iso_timestamp(raw.get("validFrom")) or now_iso(),
            valid_to=iso_timestamp(raw.get("validTo")) or now_iso(),
            usage_limit=raw.get("usageLimit"),
            usage_count=to_int(raw.get("usageCount")),
            is_active=raw.get("isActive"),
            created_at=iso_timestamp(raw.get("createdAt")),
            updated_at=iso_timestamp(raw.get("updatedAt")),
        )


@strawberry.type
class CouponConnection:
    coupons: List[Coupon]
    pagination: Pagination


@strawberry.type
class CouponValidation:
    valid: bool
    discount: float
    final_total: float
    code: Optional[str] = None
    discount_type: Optional[str] = None
    message: Optional[str] = None


@strawberry.input
class CouponInput:
    code: Optional[str] = None
    description: Optional[str] = None
    discount_type: Optional[str] = None
    discount: Optional[float] = None
    min_purchase: Optional[float] = None
    max_discount: Optional[float] = None
    valid_from: Optional[str] = None
    valid_to: Optional[str] = None
    usage_limit: Optional[int] = None
    is_active: Optional[bool] = None


def coupon_validation(body: Any, code: str, order_total: float) -> CouponValidation:
    envelope = decode(body)
    data = data_mapping(body)
    coupon = data.get("coupon") if isinstance(data.get("coupon"), dict) else {}
    discount = to_float(data.get("discount"))
    return CouponValidation(
        valid=bool(data.get("valid", envelope.success)),
        discount=discount,
        final_total=to_float(data.get("finalTotal"), order_total - discount),
        code=coupon.get("code") or data.get("code") or code,
        discount_type=coupon.get("discountType") or data.get("discountType"),
        message=envelope.message,
    )


@strawberry.type
class CouponQuery:
    @strawberry.field
    async def coupons(self, info: Info, page: int = 1, limit: int = 10, search: Optional[str] = None,
                      is_active: Optional[bool] = None) -> CouponConnection:
        token = require_token(info)
        params = {"page": page, "limit": limit, "search": search, "isActive": is_active}
        try:
            resp = await coupon_client.get("/api/coupons", params=params, **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return CouponConnection(
            coupons=[Coupon.from_payload(raw) for raw in pick_list(resp, "coupons")],
            pagination=Pagination.from_payload(data_mapping(resp).get("pagination"), page, limit),
        )

    @strawberry.field
    async def coupon(self, info: Info, id: strawberry.ID) -> Optional[Coupon]:
        token = require_token(info)
        try:
            resp = await coupon_client.get(f"/api/coupons/{id}", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return Coupon.from_payload(pick_entity(resp, "coupon"))

    @strawberry.field
    async def validate_coupon(self, code: str, order_total: float) -> CouponValidation:
        try:
            resp = await coupon_client.post("/api/coupons/validate", json={"code": code, "orderTotal": order_total})
        except DownstreamError as e:
            logger.info(f"Coupon {code} rejected: {e.message}")
            return CouponValidation(
                valid=False,
                discount=0.0,
                final_total=order_total,
                code=code,
                message=downstream_message(e, "Invalid coupon"),
            )
        return coupon_validation(resp, code, order_total)


@strawberry.type
class CouponMutation:
    @strawberry.mutation
    async def create_coupon(self, info: Info, input: CouponInput) -> Coupon:
        token = require_token(info)
        try:
            resp = await coupon_client.post("/api/coupons", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return Coupon.from_payload(pick_entity(resp, "coupon"))

    @strawberry.mutation
    async def update_coupon(self, info: Info, id: strawberry.ID, input: CouponInput) -> Coupon:
        token = require_token(info)
        try:
            resp = await coupon_client.put(f"/api/coupons/{id}", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return Coupon.from_payload(pick_entity(resp, "coupon"))

    @strawberry.mutation
    async def delete_coupon(self, info: Info, id: strawberry.ID) -> bool:
        token = require_token(info)
        try:
            await coupon_client.delete(f"/api/coupons/{id}", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return True
