"""
GraphQL Gateway
Fronts the auth, category, coupon, order, product and ticket services.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import os

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.core import HealthStatus, RequestLoggingMiddleware, ServiceHealth, get_logger, setup_logging

from . import __version__
from .api.graphql_routes import router as graphql_router
from .api.health_routes import router as health_router
from .api.seed_routes import router as seed_router
from .context import build_context
from .core_settings import get_settings
from .engine import engine

SERVICE_NAME = "graphql-gateway"
SERVICE_VERSION = os.getenv("SERVICE_VERSION", __version__)

settings = get_settings()

setup_logging(service_name=SERVICE_NAME, level=settings.LOG_LEVEL)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {SERVICE_NAME} version {SERVICE_VERSION} ({settings.ENVIRONMENT})")
    await engine.startup()
    yield
    await engine.shutdown()
    logger.info(f"Shutting down {SERVICE_NAME}")


app = FastAPI(
    title="GraphQL Gateway",
    description="GraphQL aggregation layer over the e-commerce REST services",
    version=SERVICE_VERSION,
    docs_url="/swagger",
    redoc_url=None,
    lifespan=lifespan,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        return response


class EngineReadyMiddleware(BaseHTTPMiddleware):
    """Holds requests until the GraphQL engine is initialized."""

    async def dispatch(self, request: Request, call_next):
        try:
            await engine.startup()
        except Exception as e:
            logger.error(f"GraphQL engine failed to initialize: {e}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"success": False, "message": "GraphQL Gateway is not ready", "error": str(e)},
            )
        return await call_next(request)


def _user_id(request: Request):
    return build_context(request.headers.get("Authorization")).user.id


app.add_middleware(EngineReadyMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware, user_resolver=_user_id)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

health = ServiceHealth(SERVICE_NAME, SERVICE_VERSION, message="GraphQL Gateway is running")


async def _engine_check():
    if engine.ready:
        return {"status": HealthStatus.PASS, "componentType": "component"}
    return {"status": HealthStatus.FAIL, "componentType": "component", "output": "GraphQL engine not initialized"}


health.add_check("graphql:engine", _engine_check)

app.include_router(health.create_health_router())
app.include_router(health_router)
app.include_router(seed_router)
app.include_router(graphql_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "success": True,
        "message": "GraphQL Gateway API",
        "graphqlEndpoint": "/graphql",
        "healthEndpoint": "/api/health/services",
        "seedEndpoint": "/api/seed",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("gateway.main:app", host="0.0.0.0", port=settings.PORT)
