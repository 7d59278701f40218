"""Exception handlers mapping domain errors to HTTP responses"""

import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from finhub_gateway.api.dependencies import get_request_id
from finhub_gateway.domain.exceptions import UpstreamUnavailableError, ValidationError
from finhub_gateway.infrastructure.observability.metrics import (
    analytics_timeouts_counter,
    store_failures_counter,
)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logging.warning(f"Validation error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=400, content={"error": "Bad Request", "detail": str(exc)})


async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError) -> JSONResponse:
    store_failures_counter.inc()
    logging.error(f"Store error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(
        status_code=503,
        content={"error": "Service Unavailable", "detail": "Transaction store unavailable"},
    )


async def timeout_handler(request: Request, exc: TimeoutError) -> JSONResponse:
    analytics_timeouts_counter.inc()
    logging.error("Analytics request timed out", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=504, content={"error": "Gateway Timeout", "detail": "Request timed out"})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.error(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(UpstreamUnavailableError, upstream_unavailable_handler)
    app.add_exception_handler(TimeoutError, timeout_handler)
    app.add_exception_handler(asyncio.TimeoutError, timeout_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
