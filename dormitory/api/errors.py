"""API error handling and response helpers."""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError

from dormitory.errors import AppError, ConflictError, StoreUnavailableError

logger = logging.getLogger(__name__)


def error_response(error: AppError) -> Dict[str, Any]:
    """Create a standardized error response."""
    return {"error": error.to_dict()}


def _json_error(error: AppError) -> JSONResponse:
    return JSONResponse(status_code=error.http_status, content=error_response(error))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.code}: {exc.message}")
    return _json_error(exc)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} integrity error: {exc.orig}")
    return _json_error(ConflictError("write conflicts with an existing record"))


async def operational_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} storage failure: {exc.orig}")
    return _json_error(StoreUnavailableError())


def register_error_handlers(app: FastAPI) -> None:
    """Map domain and storage exceptions to JSON error bodies."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
