"""Once-initialized GraphQL engine.

Holds the schema and owns the downstream client pool. The first caller of
``startup()`` builds it; callers arriving while that is in flight await the
same future instead of building a second engine.
"""
import asyncio
from typing import Any, Dict, Optional

import strawberry

from shared.core import get_logger

from .clients import close_clients
from .context import RequestContext

logger = get_logger(__name__)


class GraphQLEngine:
    def __init__(self, schema_factory=None):
        self._schema_factory = schema_factory
        self._schema: Optional[strawberry.Schema] = None
        self._init: Optional[asyncio.Future] = None
        self._lock = asyncio.Lock()
        self.builds = 0

    @property
    def ready(self) -> bool:
        return self._schema is not None

    async def startup(self) -> strawberry.Schema:
        if self._schema is not None:
            return self._schema
        async with self._lock:
            if self._init is None:
                self._init = asyncio.ensure_future(self._build())
            init = self._init
        try:
            return await asyncio.shield(init)
        except Exception:
            async with self._lock:
                if self._init is init:
                    # let the next request retry
                    self._init = None
            raise

    async def _build(self) -> strawberry.Schema:
        logger.info("Initializing GraphQL engine")
        factory = self._schema_factory
        if factory is None:
            from .schema import build_schema as factory
        self.builds += 1
        schema = factory()
        self._schema = schema
        logger.info("GraphQL engine ready")
        return schema

    async def shutdown(self) -> None:
        async with self._lock:
            init, self._init = self._init, None
            self._schema = None
        if init is not None and not init.done():
            init.cancel()
        await close_clients()
        logger.info("GraphQL engine stopped")

    async def execute(self, query: str, context: RequestContext, variables: Optional[Dict[str, Any]] = None,
                      operation_name: Optional[str] = None) -> Dict[str, Any]:
        schema = await self.startup()
        result = await schema.execute(
            query,
            variable_values=variables,
            context_value=context,
            operation_name=operation_name,
        )
        payload: Dict[str, Any] = {"data": result.data}
        if result.errors:
            payload["errors"] = [error.formatted for error in result.errors]
        return payload


engine = GraphQLEngine()
