from typing import Any, Dict, List, Optional

import strawberry
from strawberry.types import Info

from shared.core import get_logger

from ..clients import DownstreamError, add_auth_header, auth_client, product_client
from ..envelope import data_mapping, decode, pick_entity, pick_list
from ..errors import Unauthenticated, UnexpectedShapeError, downstream_message, relay
from .common import Pagination, context_of, iso_timestamp, normalize_id, to_int, to_payload

logger = get_logger(__name__)

LOGIN_TO_REVIEW = "You must be logged in to submit a review"
LOGIN_TO_DELETE_REVIEW = "You must be logged in to delete a review"
UNKNOWN_USER = "Unable to get user information"


@strawberry.type
class Review:
    id: Optional[strawberry.ID]
    product_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    rating: int = 0
    title: Optional[str] = None
    comment: Optional[str] = None
    images: List[str] = strawberry.field(default_factory=list)
    helpful: int = 0
    verified: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Review":
        product_id = raw.get("productId")
        user_id = raw.get("userId")
        return cls(
            id=normalize_id(raw),
            product_id=normalize_id(product_id) if isinstance(product_id, dict) else product_id,
            user_id=normalize_id(user_id) if isinstance(user_id, dict) else user_id,
            user_name=raw.get("userName"),
            rating=to_int(raw.get("rating")),
            title=raw.get("title"),
            comment=raw.get("comment"),
            images=list(raw.get("images") or []),
            helpful=to_int(raw.get("helpful")),
            verified=bool(raw.get("verified")),
            created_at=iso_timestamp(raw.get("createdAt")),
        )


@strawberry.type
class ReviewConnection:
    reviews: List[Review]
    pagination: Pagination


@strawberry.type
class ReviewResult:
    success: bool
    message: Optional[str] = None
    review: Optional[Review] = None


@strawberry.input
class ReviewInput:
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    images: Optional[List[str]] = None


async def current_user(token: str) -> Optional[Dict[str, Any]]:
    """The caller's user record from the auth service, or None."""
    resp = await auth_client.get("/api/auth/me", **add_auth_header(token))
    return pick_entity(resp, "user", required=False)


@strawberry.type
class ReviewQuery:
    @strawberry.field
    async def product_reviews(self, product_id: strawberry.ID, page: int = 1, limit: int = 10) -> ReviewConnection:
        try:
            resp = await product_client.get(f"/api/reviews/{product_id}", params={"page": page, "limit": limit})
            return ReviewConnection(
                reviews=[Review.from_payload(raw) for raw in pick_list(resp, "reviews")],
                pagination=Pagination.from_payload(data_mapping(resp).get("pagination"), page, limit),
            )
        except (DownstreamError, UnexpectedShapeError) as e:
            logger.warning(f"Reviews for {product_id} unavailable: {e.message}")
            return ReviewConnection(reviews=[], pagination=Pagination(page=page, limit=limit))


@strawberry.type
class ReviewMutation:
    @strawberry.mutation
    async def create_review(self, info: Info, product_id: strawberry.ID, input: ReviewInput) -> ReviewResult:
        token = context_of(info).token
        if not token:
            return ReviewResult(success=False, message=LOGIN_TO_REVIEW)
        try:
            user = await current_user(token)
            if not user:
                return ReviewResult(success=False, message=UNKNOWN_USER)
            body = to_payload(input)
            body.update(userId=normalize_id(user), userName=user.get("name"))
            resp = await product_client.post(f"/api/reviews/{product_id}", json=body, **add_auth_header(token))
        except DownstreamError as e:
            return ReviewResult(success=False, message=downstream_message(e, "Failed to submit review"))
        envelope = decode(resp)
        raw = pick_entity(resp, "review", required=False)
        return ReviewResult(
            success=envelope.success,
            message=envelope.message,
            review=Review.from_payload(raw) if raw else None,
        )

    @strawberry.mutation
    async def mark_review_helpful(self, review_id: strawberry.ID) -> Review:
        # Every call increments the counter downstream; there is no per-user dedup.
        try:
            resp = await product_client.post(f"/api/reviews/{review_id}/helpful")
        except DownstreamError as e:
            raise relay(e)
        return Review.from_payload(pick_entity(resp, "review"))

    @strawberry.mutation
    async def delete_review(self, info: Info, review_id: strawberry.ID) -> bool:
        token = context_of(info).token
        if not token:
            raise Unauthenticated(LOGIN_TO_DELETE_REVIEW)
        try:
            if not await current_user(token):
                raise Unauthenticated(UNKNOWN_USER)
            await product_client.delete(f"/api/reviews/{review_id}", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return True
