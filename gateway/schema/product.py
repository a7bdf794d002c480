from typing import Any, Dict, List, Optional

import strawberry
from graphql import GraphQLError
from strawberry.types import Info

from shared.core import get_logger

from ..clients import DownstreamError, add_auth_header, auth_client, product_client
from ..envelope import data_mapping, pick_entity, pick_list
from ..errors import UnexpectedShapeError, relay
from .common import Pagination, iso_timestamp, normalize_id, require_token, to_float, to_int, to_payload

logger = get_logger(__name__)

SELLER_FALLBACK_NAME = "Seller"


@strawberry.type
class Seller:
    id: strawberry.ID
    name: Optional[str] = None
    email: Optional[str] = None


@strawberry.type
class Product:
    id: Optional[strawberry.ID]
    name: Optional[str] = None
    description: Optional[str] = None
    price: float = 0.0
    category: Optional[str] = None
    stock: int = 0
    image_url: Optional[str] = None
    seller_id: Optional[str] = None
    is_active: Optional[bool] = None
    tags: List[str] = strawberry.field(default_factory=list)
    rating: Optional[float] = None
    review_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @strawberry.field
    async def seller(self) -> Optional[Seller]:
        if not self.seller_id:
            return None
        try:
            resp = await auth_client.get(f"/api/users/{self.seller_id}")
            raw = pick_entity(resp, "user")
        except (DownstreamError, GraphQLError) as e:
            logger.warning(f"Seller lookup failed for {self.seller_id}: {e}")
            return Seller(id=self.seller_id, name=SELLER_FALLBACK_NAME, email=None)
        return Seller(
            id=normalize_id(raw) or self.seller_id,
            name=raw.get("name") or SELLER_FALLBACK_NAME,
            email=raw.get("email"),
        )

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Product":
        seller_id = raw.get("sellerId")
        if isinstance(seller_id, dict):
            seller_id = normalize_id(seller_id)
        return cls(
            id=normalize_id(raw),
            name=raw.get("name"),
            description=raw.get("description"),
            price=to_float(raw.get("price")),
            category=raw.get("category"),
            stock=to_int(raw.get("stock")),
            image_url=raw.get("imageUrl"),
            seller_id=str(seller_id) if seller_id else None,
            is_active=raw.get("isActive"),
            tags=list(raw.get("tags") or []),
            rating=raw.get("rating"),
            review_count=to_int(raw.get("reviewCount")),
            created_at=iso_timestamp(raw.get("createdAt")),
            updated_at=iso_timestamp(raw.get("updatedAt")),
        )


@strawberry.type
class ProductConnection:
    products: List[Product]
    pagination: Pagination


@strawberry.input
class ProductInput:
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    stock: Optional[int] = None
    image_url: Optional[str] = None
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None


def product_params(page: int, limit: int, search: Optional[str] = None, category: Optional[str] = None,
                   min_price: Optional[float] = None, max_price: Optional[float] = None,
                   sort_by: Optional[str] = None, sort_order: Optional[str] = None,
                   featured: bool = False) -> Dict[str, Any]:
    params = {
        "page": page,
        "limit": limit,
        "search": search,
        "category": category,
        "minPrice": min_price,
        "maxPrice": max_price,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    if featured:
        params["sortBy"] = "reviewCount"
        params["sortOrder"] = "desc"
    return params


@strawberry.type
class ProductQuery:
    @strawberry.field
    async def products(self, page: int = 1, limit: int = 20, search: Optional[str] = None,
                       category: Optional[str] = None, min_price: Optional[float] = None,
                       max_price: Optional[float] = None, sort_by: Optional[str] = None,
                       sort_order: Optional[str] = None, featured: bool = False) -> ProductConnection:
        params = product_params(page, limit, search, category, min_price, max_price, sort_by, sort_order, featured)
        try:
            resp = await product_client.get("/api/products", params=params)
            return ProductConnection(
                products=[Product.from_payload(raw) for raw in pick_list(resp, "products")],
                pagination=Pagination.from_payload(data_mapping(resp).get("pagination"), page, limit),
            )
        except (DownstreamError, UnexpectedShapeError) as e:
            logger.warning(f"Product listing degraded: {e.message}")
            return ProductConnection(products=[], pagination=Pagination(page=page, limit=limit))

    @strawberry.field
    async def product(self, id: strawberry.ID) -> Optional[Product]:
        try:
            resp = await product_client.get(f"/api/products/{id}")
            raw = pick_entity(resp, "product", required=False)
        except (DownstreamError, UnexpectedShapeError) as e:
            logger.warning(f"Product {id} unavailable: {e.message}")
            return None
        return Product.from_payload(raw) if raw else None

    @strawberry.field
    async def products_by_seller(self, seller_id: strawberry.ID) -> List[Product]:
        try:
            resp = await product_client.get(f"/api/products/seller/{seller_id}")
        except DownstreamError as e:
            logger.warning(f"Seller {seller_id} products unavailable: {e.message}")
            return []
        return [Product.from_payload(raw) for raw in pick_list(resp, "products")]


@strawberry.type
class ProductMutation:
    @strawberry.mutation
    async def create_product(self, info: Info, input: ProductInput) -> Product:
        token = require_token(info)
        try:
            resp = await product_client.post("/api/products", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return Product.from_payload(pick_entity(resp, "product"))

    @strawberry.mutation
    async def update_product(self, info: Info, id: strawberry.ID, input: ProductInput) -> Product:
        token = require_token(info)
        try:
            resp = await product_client.put(f"/api/products/{id}", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return Product.from_payload(pick_entity(resp, "product"))

    @strawberry.mutation
    async def delete_product(self, info: Info, id: strawberry.ID) -> bool:
        token = require_token(info)
        try:
            await product_client.delete(f"/api/products/{id}", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return True
