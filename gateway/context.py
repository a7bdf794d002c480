"""Per-request context built from the inbound ``Authorization`` header.

The bearer token is decoded WITHOUT verifying its signature. The gateway only
reads the claims to route calls and shape responses; every downstream service
verifies the token itself on each call. Never use ``RequestContext.user`` as
an authorization boundary.
"""
from typing import Any, Dict, Optional

import jwt
from pydantic import BaseModel

from shared.core import get_logger

from .clients import BEARER_PREFIX

logger = get_logger(__name__)


class UserIdentity(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None

    class Config:
        frozen = True

    @property
    def is_anonymous(self) -> bool:
        return not self.model_dump(exclude_none=True)


class RequestContext(BaseModel):
    token: str = ""
    user: UserIdentity = UserIdentity()

    class Config:
        frozen = True

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


def extract_token(authorization: Optional[str]) -> str:
    if not authorization:
        return ""
    if authorization.startswith(BEARER_PREFIX):
        authorization = authorization[len(BEARER_PREFIX):]
    return authorization.strip()


def decode_claims(token: str) -> Dict[str, Any]:
    """Unverified claims of ``token``; ``{}`` when it cannot be decoded."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        logger.debug(f"Ignoring undecodable bearer token: {e}")
        return {}
    return claims if isinstance(claims, dict) else {}


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def identity_from_claims(claims: Dict[str, Any]) -> UserIdentity:
    """Map token claims onto a user; claims of the wrong type are dropped."""
    if not claims:
        return UserIdentity()
    user_id = claims.get("userId") or claims.get("id") or claims.get("sub")
    if not isinstance(user_id, (str, int)) or isinstance(user_id, bool):
        user_id = None
    email = _text(claims.get("email"))
    return UserIdentity(
        id=str(user_id) if user_id is not None else None,
        email=email,
        role=_text(claims.get("role")),
        name=_text(claims.get("name")) or email,
    )


def build_context(authorization: Optional[str]) -> RequestContext:
    token = extract_token(authorization)
    user = identity_from_claims(decode_claims(token)) if token else UserIdentity()
    return RequestContext(token=token, user=user)
