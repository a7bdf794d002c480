from typing import Any, Dict, List, Optional

import strawberry
from strawberry.types import Info

from shared.core import get_logger

from ..clients import DownstreamError, add_auth_header, category_client
from ..envelope import decode, pick_entity, pick_list
from ..errors import UnexpectedShapeError, downstream_message
from .common import iso_timestamp, normalize_id, now_iso, require_token, to_int, to_payload

logger = get_logger(__name__)


@strawberry.type
class Category:
    id: Optional[strawberry.ID]
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool = True
    product_count: int = 0
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Category":
        # timestamps are non-null in the schema; missing ones read as now
        return cls(
            id=normalize_id(raw),
            name=raw.get("name") or "",
            slug=raw.get("slug"),
            description=raw.get("description"),
            icon=raw.get("icon"),
            is_active=raw.get("isActive", True) is not False,
            product_count=to_int(raw.get("productCount")),
            created_at=iso_timestamp(raw.get("createdAt")) or now_iso(),
            updated_at=iso_timestamp(raw.get("updatedAt")) or now_iso(),
        )


@strawberry.type
class CategoryList:
    success: bool
    message: Optional[str] = None
    data: List[Category] = strawberry.field(default_factory=list)
    count: int = 0


@strawberry.type
class CategoryResult:
    success: bool
    message: Optional[str] = None
    data: Optional[Category] = None


@strawberry.input
class CategoryFilter:
    search: Optional[str] = None
    is_active: Optional[bool] = None


@strawberry.input
class CategoryInput:
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None


def category_result(body: Any) -> CategoryResult:
    envelope = decode(body)
    raw = pick_entity(body, "category", required=False)
    return CategoryResult(
        success=envelope.success,
        message=envelope.message,
        data=Category.from_payload(raw) if raw else None,
    )


@strawberry.type
class CategoryQuery:
    @strawberry.field
    async def categories(self, filter: Optional[CategoryFilter] = None) -> CategoryList:
        params = to_payload(filter) if filter else None
        try:
            resp = await category_client.get("/api/categories", params=params)
            envelope = decode(resp)
            categories = [Category.from_payload(raw) for raw in pick_list(resp, "categories")]
        except (DownstreamError, UnexpectedShapeError) as e:
            logger.warning(f"Category listing degraded: {e.message}")
            return CategoryList(success=False, message=downstream_message(e), data=[], count=0)
        count = envelope.extras.get("count")
        return CategoryList(
            success=envelope.success,
            message=envelope.message,
            data=categories,
            count=to_int(count, len(categories)),
        )

    @strawberry.field
    async def category(self, id: strawberry.ID) -> Optional[Category]:
        try:
            resp = await category_client.get(f"/api/categories/{id}")
            raw = pick_entity(resp, "category", required=False)
        except (DownstreamError, UnexpectedShapeError) as e:
            logger.warning(f"Category {id} unavailable: {e.message}")
            return None
        return Category.from_payload(raw) if raw else None


@strawberry.type
class CategoryMutation:
    @strawberry.mutation
    async def create_category(self, info: Info, input: CategoryInput) -> CategoryResult:
        token = require_token(info)
        try:
            resp = await category_client.post("/api/categories", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            return CategoryResult(success=False, message=downstream_message(e, "Failed to create category"))
        return category_result(resp)

    @strawberry.mutation
    async def update_category(self, info: Info, id: strawberry.ID, input: CategoryInput) -> CategoryResult:
        token = require_token(info)
        try:
            resp = await category_client.put(f"/api/categories/{id}", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            return CategoryResult(success=False, message=downstream_message(e, "Failed to update category"))
        return category_result(resp)

    @strawberry.mutation
    async def delete_category(self, info: Info, id: strawberry.ID) -> CategoryResult:
        token = require_token(info)
        try:
            resp = await category_client.delete(f"/api/categories/{id}", **add_auth_header(token))
        except DownstreamError as e:
            return CategoryResult(success=False, message=downstream_message(e, "Failed to delete category"))
        return category_result(resp)
