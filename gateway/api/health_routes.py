from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from shared.core import get_logger

from ..health import GATEWAY_NAME, HEALTHY, HealthAggregator, ServiceNotFound, process_uptime, utc_timestamp
from .dependencies import get_aggregator

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def gateway_health():
    return {
        "service": f"graphql-{GATEWAY_NAME}",
        "status": HEALTHY,
        "timestamp": utc_timestamp(),
        "uptime": process_uptime(),
    }


@router.get("/services")
async def services_health(aggregator: HealthAggregator = Depends(get_aggregator)):
    try:
        result = await aggregator.check_all()
    except Exception as e:
        logger.error(f"Health aggregation failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"success": False, "overallStatus": "error", "message": str(e), "timestamp": utc_timestamp()},
        )
    return result.model_dump(exclude_none=True)


@router.get("/services/{service}")
async def service_health(service: str, aggregator: HealthAggregator = Depends(get_aggregator)):
    try:
        record = await aggregator.check_one(service)
    except ServiceNotFound as e:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": str(e.args[0]), "availableServices": e.available},
        )
    content = {
        "service": record.name,
        "status": record.status,
        "url": record.url,
        "timestamp": record.timestamp,
    }
    if record.healthy:
        content["details"] = record.details
        return content
    content["error"] = record.error
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=content)
