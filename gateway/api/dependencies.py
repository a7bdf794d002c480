from fastapi import Request

from ..context import RequestContext, build_context
from ..health import HealthAggregator

_aggregator = None


def get_request_context(request: Request) -> RequestContext:
    """Context is built once per request and cached on ``request.state``."""
    context = getattr(request.state, "gateway_context", None)
    if context is None:
        context = build_context(request.headers.get("Authorization"))
        request.state.gateway_context = context
    return context


def get_aggregator() -> HealthAggregator:
    global _aggregator
    if _aggregator is None:
        _aggregator = HealthAggregator()
    return _aggregator
