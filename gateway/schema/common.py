"""Helpers shared by every domain module of the schema."""
import dataclasses
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import strawberry
from strawberry.types import Info

from ..context import RequestContext
from ..errors import Unauthenticated


def normalize_id(raw: Dict[str, Any]) -> Optional[str]:
    """``_id`` or ``id`` of a downstream record, as a string."""
    value = raw.get("_id")
    if value is None:
        value = raw.get("id")
    if isinstance(value, dict):
        value = value.get("$oid")
    return str(value) if value is not None else None


def normalize_status(value: Any, default: str = "PENDING") -> str:
    return str(value).upper() if value else default


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_timestamp(value: Any) -> Optional[str]:
    """ISO-8601 string for a datetime, epoch millis or string; ``None`` if missing."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _format_datetime(datetime.fromtimestamp(value / 1000, tz=timezone.utc))
    if isinstance(value, dict) and "$date" in value:
        return iso_timestamp(value["$date"])
    return str(value)


def now_iso() -> str:
    return _format_datetime(datetime.now(timezone.utc))


def to_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def context_of(info: Info) -> RequestContext:
    return info.context


def require_token(info: Info) -> str:
    """Token of the current request; raises before any downstream call if absent."""
    token = context_of(info).token
    if not token:
        raise Unauthenticated()
    return token


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_payload(data: Any) -> Any:
    """Strawberry input -> camelCase JSON body, dropping unset fields."""
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        data = dataclasses.asdict(data)
    if isinstance(data, dict):
        return {_camel(key): to_payload(value) for key, value in data.items()
                if value is not None and value is not strawberry.UNSET}
    if isinstance(data, list):
        return [to_payload(item) for item in data]
    return data


@strawberry.type
class Pagination:
    page: int = 1
    limit: int = 10
    total: int = 0
    pages: int = 0

    @classmethod
    def from_payload(cls, raw: Optional[Dict[str, Any]], page: int = 1, limit: int = 10) -> "Pagination":
        raw = raw or {}
        return cls(
            page=to_int(raw.get("page"), page),
            limit=to_int(raw.get("limit"), limit),
            total=to_int(raw.get("total")),
            pages=to_int(raw.get("pages", raw.get("totalPages"))),
        )


@strawberry.type
class OperationResult:
    success: bool
    message: Optional[str] = None
