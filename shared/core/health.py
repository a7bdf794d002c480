"""
Self health endpoints for a gateway process:
- /health        liveness summary
- /health/live   bare liveness probe
- /health/ready  readiness, driven by registered checks
- /metrics       process metrics
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from typing import Any, Awaitable, Callable, Dict, Optional
import os
import time
from datetime import datetime, timezone
from enum import Enum
import psutil
import logging

logger = logging.getLogger(__name__)

ReadinessCheck = Callable[[], Awaitable[Dict[str, Any]]]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HealthStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"


class ServiceHealth:
    """Health router for one process, plus the readiness checks it runs."""

    def __init__(self, service_name: str, version: str = "1.0.0", message: Optional[str] = None):
        self.service_name = service_name
        self.version = version
        self.message = message or f"{service_name} is running"
        self.start_time = time.time()
        self.checks_performed = 0
        self.last_check_time = None
        self._checks: Dict[str, ReadinessCheck] = {}

    @property
    def uptime(self) -> float:
        return round(time.time() - self.start_time, 3)

    def add_check(self, name: str, check: ReadinessCheck) -> None:
        """Register a readiness check, e.g. ``"graphql:engine"``."""
        self._checks[name] = check

    def create_health_router(self) -> APIRouter:
        router = APIRouter(tags=["health"])

        @router.get("/health", status_code=status.HTTP_200_OK)
        async def health_check() -> Dict[str, Any]:
            return {
                "success": True,
                "message": self.message,
                "service": self.service_name,
                "version": self.version,
                "releaseId": os.getenv("RELEASE_ID", "unknown"),
                "uptime": self.uptime,
                "timestamp": _now(),
            }

        @router.get("/health/live", status_code=status.HTTP_200_OK)
        async def liveness() -> Dict[str, Any]:
            return {"status": "alive"}

        @router.get("/health/ready")
        async def readiness() -> JSONResponse:
            checks = await self.run_checks()
            overall_status = self.overall_status(checks)
            status_code = (
                status.HTTP_503_SERVICE_UNAVAILABLE if overall_status == HealthStatus.FAIL else status.HTTP_200_OK
            )
            return JSONResponse(status_code=status_code, content={
                "status": overall_status.value,
                "version": self.version,
                "serviceId": self.service_name,
                "checks": checks,
                "timestamp": _now(),
            })

        @router.get("/metrics")
        async def metrics() -> Dict[str, Any]:
            process = psutil.Process()
            memory = process.memory_info()
            return {
                "service": self.service_name,
                "version": self.version,
                "uptime_seconds": self.uptime,
                "checks_performed": self.checks_performed,
                "timestamp": _now(),
                "system": {
                    "memory_rss_bytes": memory.rss,
                    "memory_vms_bytes": memory.vms,
                    "cpu_percent": process.cpu_percent(),
                    "num_threads": process.num_threads(),
                },
            }

        return router

    async def run_checks(self) -> Dict[str, Dict[str, Any]]:
        self.checks_performed += 1
        self.last_check_time = time.time()

        checks = {"system:memory": self._check_memory()}
        for name, check in self._checks.items():
            try:
                result = await check()
            except Exception as e:
                logger.error(f"Readiness check {name} failed: {e}")
                result = {"status": HealthStatus.FAIL, "output": str(e)}
            result.setdefault("time", _now())
            result["status"] = HealthStatus(result.get("status", HealthStatus.PASS)).value
            checks[name] = result
        return checks

    def _check_memory(self) -> Dict[str, Any]:
        memory = psutil.virtual_memory()
        available_mb = memory.available / (1024 ** 2)

        if available_mb < 100:
            status_val = HealthStatus.FAIL
        elif available_mb < 500:
            status_val = HealthStatus.WARN
        else:
            status_val = HealthStatus.PASS

        return {
            "status": status_val.value,
            "componentType": "system",
            "observedValue": f"{available_mb:.2f}",
            "observedUnit": "MB",
            "time": _now(),
        }

    @staticmethod
    def overall_status(checks: Dict[str, Dict[str, Any]]) -> HealthStatus:
        statuses = {HealthStatus(check.get("status", HealthStatus.PASS)) for check in checks.values()}
        if HealthStatus.FAIL in statuses:
            return HealthStatus.FAIL
        if HealthStatus.WARN in statuses:
            return HealthStatus.WARN
        return HealthStatus.PASS
