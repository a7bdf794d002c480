from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from shared.core import get_logger

from ..context import RequestContext
from ..core_settings import get_settings
from ..seed import clear_database, seed_database, seed_status
from ..seed.store import get_engine
from .dependencies import get_request_context

logger = get_logger(__name__)

router = APIRouter(prefix="/api/seed", tags=["seed"])


class SeedRequest(BaseModel):
    preserveUsers: bool = True


def _admin_denial(context: RequestContext, message: str) -> Optional[JSONResponse]:
    if not context.is_authenticated:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "message": "Not authenticated"},
        )
    role = (context.user.role or "").lower()
    if role != get_settings().ADMIN_ROLE.lower():
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"success": False, "message": message})
    return None


def _store_failure(action: str, e: Exception) -> JSONResponse:
    logger.error(f"{action} failed: {e}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": f"Error {action.lower()}", "error": str(e)},
    )


@router.post("")
def seed(payload: Optional[SeedRequest] = Body(None), context: RequestContext = Depends(get_request_context),
         engine=Depends(get_engine)):
    denied = _admin_denial(context, "Only admins can seed data")
    if denied:
        return denied
    preserve_users = payload.preserveUsers if payload else True
    logger.info(f"Seeding requested by {context.user.email} (preserveUsers={preserve_users})")
    try:
        return seed_database(engine, preserve_users=preserve_users)
    except SQLAlchemyError as e:
        return _store_failure("Seeding database", e)


@router.post("/clear")
def clear(context: RequestContext = Depends(get_request_context), engine=Depends(get_engine)):
    denied = _admin_denial(context, "Only admins can clear data")
    if denied:
        return denied
    logger.info(f"Clear requested by {context.user.email}")
    try:
        return clear_database(engine)
    except SQLAlchemyError as e:
        return _store_failure("Clearing database", e)


@router.get("/status")
def status_report(engine=Depends(get_engine)):
    try:
        return {"success": True, **seed_status(engine)}
    except SQLAlchemyError as e:
        return _store_failure("Reading seed status", e)
