"""
Structured JSON logging with per-request trace context.

Every record carries the service name, environment and, inside a request,
the request id, correlation id and caller's user id.
"""

import logging
import logging.handlers
import os
import re
import sys
import json
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from contextvars import ContextVar
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

_service_name = "unknown-service"


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, ELK / CloudWatch friendly."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "@timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": _service_name,
            "environment": os.getenv("ENVIRONMENT") or os.getenv("NODE_ENV", "development"),
            "version": os.getenv("SERVICE_VERSION", "1.0.0"),
        }

        trace_context = self._get_trace_context()
        if trace_context:
            log_obj["trace"] = trace_context

        log_obj["location"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        if hasattr(record, 'extra_fields'):
            log_obj["custom"] = record.extra_fields

        if hasattr(record, 'duration_ms'):
            log_obj["performance"] = {"duration_ms": record.duration_ms}

        return json.dumps(log_obj, default=str)

    def _get_trace_context(self) -> Optional[Dict[str, Any]]:
        context = {
            "request_id": request_id_var.get(),
            "correlation_id": correlation_id_var.get(),
            "user_id": user_id_var.get(),
        }
        context = {key: value for key, value in context.items() if value}
        return context or None


class PerformanceFilter(logging.Filter):
    """Copies ``extra_fields['duration_ms']`` onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        extra = getattr(record, 'extra_fields', None)
        if isinstance(extra, dict) and 'duration_ms' in extra:
            record.duration_ms = extra['duration_ms']
        return True


class SecurityFilter(logging.Filter):
    """Redacts bearer tokens and credential-like key/value pairs."""

    PATTERNS = [
        (re.compile(r"(Bearer\s+)[A-Za-z0-9\-_=]+(\.[A-Za-z0-9\-_=]+)*", re.IGNORECASE), r"\1***REDACTED***"),
        (re.compile(r"((?:password|token|secret|api_key|authorization)[\"']?\s*[:=]\s*[\"']?)[^\s\"',}]+",
                    re.IGNORECASE), r"\1***REDACTED***"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern, replacement in self.PATTERNS:
            redacted = pattern.sub(replacement, redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    service_name: str,
    level: str = "INFO",
    enable_console: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger for a service.

    Args:
        service_name: Name reported in every record
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Log to stdout
        log_file: Also log to this rotating file when set
    """
    global _service_name
    _service_name = service_name

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = []

    formatter = StructuredFormatter()
    handlers = []
    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(log_file, maxBytes=10485760, backupCount=5))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(PerformanceFilter())
        handler.addFilter(SecurityFilter())
        root_logger.addHandler(handler)

    logging.getLogger('uvicorn').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized",
        extra={'extra_fields': {'service': service_name, 'level': level, 'file': log_file}}
    )


class LoggerAdapter(logging.LoggerAdapter):
    """Injects the current trace context into ``extra``."""

    def process(self, msg, kwargs):
        extra = kwargs.get('extra', {})

        request_id = request_id_var.get()
        if request_id:
            extra['request_id'] = request_id

        correlation_id = correlation_id_var.get()
        if correlation_id:
            extra['correlation_id'] = correlation_id

        user_id = user_id_var.get()
        if user_id:
            extra['user_id'] = user_id

        kwargs['extra'] = extra
        return msg, kwargs


def get_logger(name: str) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), {})


def set_request_context(
    request_id: Optional[str] = None,
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None
) -> list:
    """Set the trace context; returns tokens for ``reset_request_context``."""
    tokens = []
    if request_id:
        tokens.append((request_id_var, request_id_var.set(request_id)))
    if correlation_id:
        tokens.append((correlation_id_var, correlation_id_var.set(correlation_id)))
    if user_id:
        tokens.append((user_id_var, user_id_var.set(user_id)))
    return tokens


def reset_request_context(tokens: list) -> None:
    for var, token in reversed(tokens):
        var.reset(token)


def generate_request_id() -> str:
    return str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request with its duration and echoes ``X-Request-ID``.

    ``user_resolver`` maps a request to the caller's user id for the trace
    context; it must not raise.
    """

    def __init__(self, app, user_resolver: Optional[Callable[[Request], Optional[str]]] = None):
        super().__init__(app)
        self.user_resolver = user_resolver

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        user_id = self.user_resolver(request) if self.user_resolver else None
        tokens = set_request_context(
            request_id=request_id,
            correlation_id=request.headers.get('X-Correlation-ID'),
            user_id=user_id,
        )

        logger = get_logger(__name__)
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={'extra_fields': {
                'method': request.method,
                'path': request.url.path,
                'client_host': request.client.host if request.client else None,
            }}
        )
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={'extra_fields': {
                    'method': request.method,
                    'path': request.url.path,
                    'duration_ms': (time.perf_counter() - start_time) * 1000,
                }}
            )
            reset_request_context(tokens)
            raise

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={'extra_fields': {
                'method': request.method,
                'path': request.url.path,
                'status_code': response.status_code,
                'duration_ms': (time.perf_counter() - start_time) * 1000,
            }}
        )
        response.headers['X-Request-ID'] = request_id
        reset_request_context(tokens)
        return response
