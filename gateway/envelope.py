"""Decoding of the ``{success, message, data, error}`` downstream envelope.

Services nest entities inconsistently: ``data.order`` in one response,
``data`` itself in the next. The helpers below try the known shapes in order
and fail closed when a required entity cannot be found.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from .errors import UnexpectedShapeError


class Envelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Any = None
    error: Optional[str] = None

    class Config:
        extra = "allow"

    @property
    def extras(self) -> Dict[str, Any]:
        return dict(self.__pydantic_extra__ or {})


def decode(body: Any) -> Envelope:
    if not isinstance(body, dict):
        raise UnexpectedShapeError(f"Expected a JSON object, got {type(body).__name__}")
    try:
        return Envelope.model_validate(body)
    except ValidationError as e:
        raise UnexpectedShapeError(f"Malformed response envelope: {e.error_count()} invalid fields") from e


def data_mapping(body: Any) -> Dict[str, Any]:
    """``data`` when it is an object, else ``{}``."""
    data = decode(body).data
    return data if isinstance(data, dict) else {}


def pick_entity(body: Any, key: str, required: bool = True) -> Optional[Dict[str, Any]]:
    """Return ``data[key]`` if present, else ``data`` itself."""
    data = decode(body).data
    if isinstance(data, dict):
        nested = data.get(key)
        if isinstance(nested, dict):
            return nested
        if data:
            return data
    if required:
        raise UnexpectedShapeError(f"Response did not contain a {key}")
    return None


def pick_list(body: Any, key: str) -> List[Dict[str, Any]]:
    """Return ``data[key]`` or ``data`` when it is a list; ``[]`` otherwise."""
    data = decode(body).data
    if isinstance(data, dict):
        data = data.get(key)
    if isinstance(data, list):
        return [item for item in data if isinstance(item, dict)]
    return []
