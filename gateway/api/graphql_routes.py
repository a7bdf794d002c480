from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..context import RequestContext
from ..engine import engine
from .dependencies import get_request_context

router = APIRouter(tags=["graphql"])


class GraphQLRequest(BaseModel):
    query: str
    variables: Optional[Dict[str, Any]] = None
    operationName: Optional[str] = None


@router.post("/graphql")
async def graphql(payload: GraphQLRequest, context: RequestContext = Depends(get_request_context)):
    """Resolver failures come back as entries in ``errors`` with HTTP 200."""
    return await engine.execute(
        payload.query,
        context,
        variables=payload.variables,
        operation_name=payload.operationName,
    )
