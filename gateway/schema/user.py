from typing import Any, Dict, List, Optional

import strawberry
from strawberry.types import Info

from shared.core import get_logger

from ..clients import DownstreamError, add_auth_header, auth_client
from ..envelope import data_mapping, decode, pick_entity, pick_list
from ..errors import DownstreamFailure, downstream_message, relay
from .common import OperationResult, Pagination, iso_timestamp, normalize_id, require_token, to_payload

logger = get_logger(__name__)


@strawberry.type
class User:
    id: Optional[strawberry.ID]
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None
    email_verified: Optional[bool] = None
    created_at: Optional[str] = None
    last_login: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "User":
        return cls(
            id=normalize_id(raw),
            email=raw.get("email"),
            name=raw.get("name"),
            role=raw.get("role"),
            phone=raw.get("phone"),
            is_active=raw.get("isActive"),
            email_verified=raw.get("emailVerified"),
            created_at=iso_timestamp(raw.get("createdAt")),
            last_login=iso_timestamp(raw.get("lastLogin")),
        )


@strawberry.type
class AuthPayload:
    user: Optional[User]
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_expiry: Optional[str] = None


@strawberry.type
class UserConnection:
    users: List[User]
    pagination: Pagination


@strawberry.type
class TokenValidation:
    success: bool
    message: Optional[str] = None
    email: Optional[str] = None


@strawberry.input
class LoginInput:
    email: str
    password: str


@strawberry.input
class RegisterInput:
    email: str
    password: str
    name: str
    role: Optional[str] = None
    phone: Optional[str] = None


@strawberry.input
class GoogleAuthInput:
    credential: str
    role: Optional[str] = None


@strawberry.input
class ForgotPasswordInput:
    email: str


@strawberry.input
class ResetPasswordInput:
    token: str
    password: str
    confirm_password: Optional[str] = None


@strawberry.input
class UpdateProfileInput:
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


def _auth_body(body: Any) -> Dict[str, Any]:
    """Auth responses carry tokens either under ``data`` or next to it."""
    envelope = decode(body)
    payload = dict(envelope.extras)
    if isinstance(envelope.data, dict):
        payload.update(envelope.data)
    return payload


def _auth_payload(body: Any) -> AuthPayload:
    envelope = decode(body)
    if not envelope.success:
        raise DownstreamFailure(envelope.message or envelope.error or "Authentication failed")
    payload = _auth_body(body)
    user = payload.get("user")
    return AuthPayload(
        user=User.from_payload(user) if isinstance(user, dict) else None,
        access_token=payload.get("accessToken"),
        refresh_token=payload.get("refreshToken"),
        token_expiry=iso_timestamp(payload.get("tokenExpiry")),
    )


async def _authenticate(path: str, body: Dict[str, Any]) -> AuthPayload:
    try:
        resp = await auth_client.post(path, json=body)
    except DownstreamError as e:
        raise relay(e, "Authentication failed")
    return _auth_payload(resp)


async def _validate_token(path: str) -> TokenValidation:
    try:
        resp = await auth_client.get(path)
    except DownstreamError as e:
        return TokenValidation(success=False, message=downstream_message(e, "Invalid or expired token"))
    envelope = decode(resp)
    payload = _auth_body(resp)
    return TokenValidation(success=envelope.success, message=envelope.message, email=payload.get("email"))


@strawberry.type
class UserQuery:
    @strawberry.field
    async def me(self, info: Info) -> Optional[User]:
        token = require_token(info)
        try:
            resp = await auth_client.get("/api/auth/me", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return User.from_payload(pick_entity(resp, "user"))

    @strawberry.field
    async def users(self, info: Info, page: int = 1, limit: int = 10, search: Optional[str] = None,
                    role: Optional[str] = None) -> UserConnection:
        token = require_token(info)
        params = {"page": page, "limit": limit, "search": search, "role": role}
        try:
            resp = await auth_client.get("/api/users", params=params, **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return UserConnection(
            users=[User.from_payload(raw) for raw in pick_list(resp, "users")],
            pagination=Pagination.from_payload(data_mapping(resp).get("pagination"), page, limit),
        )

    @strawberry.field
    async def get_user_by_id(self, id: strawberry.ID) -> Optional[AuthPayload]:
        try:
            resp = await auth_client.get(f"/api/users/{id}")
        except DownstreamError as e:
            logger.warning(f"User lookup failed for {id}: {e.message}")
            return None
        if not decode(resp).success:
            return None
        return _auth_payload(resp)

    @strawberry.field
    async def validate_reset_token(self, token: str) -> TokenValidation:
        return await _validate_token(f"/api/auth/validate-reset-token/{token}")

    @strawberry.field
    async def validate_email_token(self, token: str) -> TokenValidation:
        return await _validate_token(f"/api/auth/verify-email/{token}")


@strawberry.type
class UserMutation:
    @strawberry.mutation
    async def login(self, input: LoginInput) -> AuthPayload:
        return await _authenticate("/api/auth/login", to_payload(input))

    @strawberry.mutation
    async def register(self, input: RegisterInput) -> AuthPayload:
        return await _authenticate("/api/auth/register", to_payload(input))

    @strawberry.mutation
    async def google_auth(self, input: GoogleAuthInput) -> AuthPayload:
        return await _authenticate("/api/auth/google", to_payload(input))

    @strawberry.mutation
    async def logout(self, info: Info) -> bool:
        token = require_token(info)
        try:
            await auth_client.post("/api/auth/logout", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return True

    @strawberry.mutation
    async def forgot_password(self, input: ForgotPasswordInput) -> OperationResult:
        try:
            resp = await auth_client.post("/api/auth/forgot-password", json=to_payload(input))
        except DownstreamError as e:
            return OperationResult(success=False, message=downstream_message(e))
        envelope = decode(resp)
        return OperationResult(success=envelope.success, message=envelope.message)

    @strawberry.mutation
    async def reset_password(self, input: ResetPasswordInput) -> OperationResult:
        try:
            resp = await auth_client.post("/api/auth/reset-password", json=to_payload(input))
        except DownstreamError as e:
            return OperationResult(success=False, message=downstream_message(e))
        envelope = decode(resp)
        return OperationResult(success=envelope.success, message=envelope.message)

    @strawberry.mutation
    async def update_profile(self, info: Info, input: UpdateProfileInput) -> User:
        token = require_token(info)
        try:
            resp = await auth_client.put("/api/auth/profile", json=to_payload(input), **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return User.from_payload(pick_entity(resp, "user"))

    @strawberry.mutation
    async def update_user_role(self, info: Info, id: strawberry.ID, role: str) -> User:
        token = require_token(info)
        try:
            resp = await auth_client.patch(f"/api/users/{id}/role", json={"role": role}, **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return User.from_payload(pick_entity(resp, "user"))

    @strawberry.mutation
    async def delete_user(self, info: Info, id: strawberry.ID) -> bool:
        token = require_token(info)
        try:
            await auth_client.delete(f"/api/users/{id}", **add_auth_header(token))
        except DownstreamError as e:
            raise relay(e)
        return True
