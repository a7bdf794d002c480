from typing import Any, Dict, List, Optional

import strawberry
from strawberry.types import Info

from ..clients import DownstreamError, add_auth_header, order_client
from ..envelope import data_mapping, pick_entity, pick_list
from ..errors import UnexpectedShapeError, relay
from .common import Pagination, iso_timestamp, normalize_id, normalize_status, require_token, to_float, to_int, to_payload

DEFAULT_ORDER_STATUS = "PENDING"
DEFAULT_PAYMENT_STATUS = "PENDING"


def _ref(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return normalize_id(value)
    return str(value) if value is not None else None


@strawberry.type
class OrderItem:
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    quantity: int = 0
    price: float = 0.0
    seller_id: Optional[str] = None
    subtotal: float = 0.0

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "OrderItem":
        return cls(
            product_id=_ref(raw.get("productId")),
            product_name=raw.get("productName"),
            quantity=to_int(raw.get("quantity")),
            price=to_float(raw.get("price")),
            seller_id=_ref(raw.get("sellerId")),
            subtotal=to_float(raw.get("subtotal")),
        )


@strawberry.type
class ShippingAddress:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


@strawberry.type
class Order:
    id: Optional[strawberry.ID]
    order_number: Optional[str] = None
    customer_id: Optional[str] = None
    customer_email: Optional[str] = None
    items: List[OrderItem] = strawberry.field(default_factory=list)
    subtotal: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    discount: float = 0.0
    coupon_code: Optional[str] = None
    total: float = 0.0
    order_status: str = DEFAULT_ORDER_STATUS
    payment_status: str = DEFAULT_PAYMENT_STATUS
    payment_method: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Order":
        address = raw.get("shippingAddress")
        return cls(
            id=normalize_id(raw),
            order_number=raw.get("orderNumber") or None,
            customer_id=_ref(raw.get("customerId")),
            customer_email=raw.get("customerEmail"),
            items=[OrderItem.from_payload(item) for item in raw.get("items") or [] if isinstance(item, dict)],
            subtotal=to_float(raw.get("subtotal")),
            tax=to_float(raw.get("tax")),
            shipping=to_float(raw.get("shipping")),
            discount=to_float(raw.get("discount")),
            coupon_code=raw.get("couponCode"),
            total=to_float(raw.get("total")),
            order_status=normalize_status(raw.get("orderStatus") or raw.get("status"), DEFAULT_ORDER_STATUS),
            payment_status=normalize_status(raw.get("paymentStatus"), DEFAULT_PAYMENT_STATUS),
            payment_method=raw.get("paymentMethod"),
            shipping_address=ShippingAddress(
                street=address.get("street"),
                city=address.get("city"),
                state=address.get("state"),
                zip=address.get("zip"),
                country=address.get("country"),
            ) if isinstance(address, dict) else None,
            notes=raw.get("notes"),
            created_at=iso_timestamp(raw.get("createdAt")),
            updated_at=iso_timestamp(raw.get("updatedAt")),
        )


@strawberry.type
class OrderConnection:
    orders: List[Order]
    pagination: Pagination


@strawberry.type
class CreateOrderResult:
    order: Optional[Order]
    orders: List[Order]
    order_count: int


@strawberry.type
class SellerStats:
    total_orders: int = 0
    total_revenue: float = 0.0
    pending_orders: int = 0
    completed_orders: int = 0
    total_items_sold: int = 0


@strawberry.input
class OrderItemInput:
    product_id: str
    quantity: int
    product_name: Optional[str] = None
    price: Optional[float] = None
    seller_id: Optional[str] = None


@strawberry.input
class ShippingAddressInput:
    street: str
    city: str
    state: str
    zip: str
    country: str = "USA"


@strawberry.input
class CreateOrderInput:
    items: List[OrderItemInput]
    shipping_address: ShippingAddressInput
    payment_method: Optional[str] = None
    coupon_code: Optional[str] = None
    notes: Optional[str] = None


@strawberry.type
class OrderQuery:
    @strawberry.field
    async def orders(self, info: Info, page: int = 1, limit: int = 10, customer_id: Optional[str] = None,
                     status: Optional[str] = None) -> OrderConnection:
        token = require_token(info)
        params = {"page": page, "limit": limit, "customerId": customer_id, "status": status}
        try:
            resp = await order_client.get("/api/orders", params=params, **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return OrderConnection(
            orders=[Order.from_payload(raw) for raw in pick_list(resp, "orders")],
            pagination=Pagination.from_payload(data_mapping(resp).get("pagination"), page, limit),
        )

    @strawberry.field
    async def order(self, info: Info, id: strawberry.ID) -> Optional[Order]:
        token = require_token(info)
        try:
            resp = await order_client.get(f"/api/orders/{id}", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return Order.from_payload(pick_entity(resp, "order"))

    @strawberry.field
    async def orders_by_customer(self, info: Info, customer_id: strawberry.ID) -> List[Order]:
        token = require_token(info)
        try:
            resp = await order_client.get(f"/api/orders/customer/{customer_id}", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return [Order.from_payload(raw) for raw in pick_list(resp, "orders")]

    @strawberry.field
    async def seller_stats(self, info: Info, seller_id: strawberry.ID) -> SellerStats:
        token = require_token(info)
        try:
            resp = await order_client.get(f"/api/orders/seller/{seller_id}/stats", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        data = data_mapping(resp)
        return SellerStats(
            total_orders=to_int(data.get("totalOrders")),
            total_revenue=to_float(data.get("totalRevenue")),
            pending_orders=to_int(data.get("pendingOrders")),
            completed_orders=to_int(data.get("completedOrders")),
            total_items_sold=to_int(data.get("totalItemsSold")),
        )


@strawberry.type
class OrderMutation:
    @strawberry.mutation
    async def create_order(self, info: Info, input: CreateOrderInput) -> CreateOrderResult:
        token = require_token(info)
        try:
            resp = await order_client.post("/api/orders", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        data = data_mapping(resp)
        orders = [Order.from_payload(raw) for raw in pick_list(resp, "orders")]
        if "orders" in data and not isinstance(data.get("order"), dict):
            # multi-seller checkout: one order per seller
            order = orders[0] if orders else None
        else:
            order = Order.from_payload(pick_entity(resp, "order"))
            orders = orders or [order]
        if order is None:
            raise UnexpectedShapeError("Response did not contain an order")
        return CreateOrderResult(order=order, orders=orders, order_count=to_int(data.get("orderCount"), len(orders)))

    @strawberry.mutation
    async def update_order_status(self, info: Info, id: strawberry.ID, status: str) -> Order:
        token = require_token(info)
        try:
            resp = await order_client.patch(
                f"/api/orders/{id}/status", json={"orderStatus": status.upper()}, **add_auth_header(token)
            )
        except DownstreamError as e:
            raise relay(e)
        return Order.from_payload(pick_entity(resp, "order"))

    @strawberry.mutation
    async def update_payment_status(self, info: Info, id: strawberry.ID, status: str) -> Order:
        token = require_token(info)
        try:
            resp = await order_client.patch(
                f"/api/orders/{id}/payment", json={"paymentStatus": status.upper()}, **add_auth_header(token)
            )
        except DownstreamError as e:
            raise relay(e)
        return Order.from_payload(pick_entity(resp, "order"))

    @strawberry.mutation
    async def cancel_order(self, info: Info, id: strawberry.ID) -> Order:
        token = require_token(info)
        try:
            resp = await order_client.post(f"/api/orders/{id}/cancel", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return Order.from_payload(pick_entity(resp, "order"))
