import asyncio
from typing import Any, Dict

import strawberry
from strawberry.types import Info

from shared.core import get_logger

from ..clients import add_auth_header, auth_client, order_client
from ..envelope import data_mapping
from .common import context_of, to_float, to_int

logger = get_logger(__name__)


@strawberry.type
class DashboardStats:
    total_users: int = 0
    total_orders: int = 0
    total_revenue: float = 0.0
    pending_orders: int = 0


def _stats(outcome: Any, source: str) -> Dict[str, Any]:
    if isinstance(outcome, BaseException):
        logger.warning(f"Dashboard {source} stats unavailable: {outcome}")
        return {}
    return data_mapping(outcome) if isinstance(outcome, dict) else {}


@strawberry.type
class DashboardQuery:
    @strawberry.field
    async def dashboard_stats(self, info: Info) -> DashboardStats:
        options = add_auth_header(context_of(info).token)
        order_stats, user_stats = await asyncio.gather(
            order_client.get("/api/orders/admin-stats", **options),
            auth_client.get("/api/users/stats", **options),
            return_exceptions=True,
        )
        orders = _stats(order_stats, "order")
        users = _stats(user_stats, "user")
        return DashboardStats(
            total_users=to_int(users.get("totalUsers")),
            total_orders=to_int(orders.get("totalOrders")),
            total_revenue=to_float(orders.get("totalRevenue")),
            pending_orders=to_int(orders.get("pendingOrders")),
        )
