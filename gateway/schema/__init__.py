"""GraphQL schema of the gateway, one module per domain."""
import strawberry
from strawberry.tools import merge_types

from .address import AddressMutation, AddressQuery
from .category import CategoryMutation, CategoryQuery
from .coupon import CouponMutation, CouponQuery
from .dashboard import DashboardQuery
from .order import OrderMutation, OrderQuery
from .product import ProductMutation, ProductQuery
from .review import ReviewMutation, ReviewQuery
from .user import UserMutation, UserQuery

Query = merge_types(
    "Query",
    (UserQuery, ProductQuery, OrderQuery, CouponQuery, AddressQuery, ReviewQuery, CategoryQuery, DashboardQuery),
)
Mutation = merge_types(
    "Mutation",
    (UserMutation, ProductMutation, OrderMutation, CouponMutation, AddressMutation, ReviewMutation, CategoryMutation),
)


def build_schema() -> strawberry.Schema:
    return strawberry.Schema(query=Query, mutation=Mutation)
