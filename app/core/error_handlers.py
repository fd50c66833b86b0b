"""
Exception handlers registered on the FastAPI app.
"""

import json
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException, BusinessRuleError

logger = logging.getLogger(__name__)


def _error_body(request: Request, error: str, message: str, details: Dict[str, Any]):
    return {
        "error": error,
        "message": message,
        "details": details,
        "path": request.url.path,
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        log_level,
        f"App exception: {exc.error_code} - {exc.message}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "details": exc.details,
            "path": request.url.path,
            "method": request.method,
        },
    )

    content = _error_body(request, exc.error_code, exc.message, exc.details)
    if isinstance(exc, BusinessRuleError):
        content["flash"] = {"error": exc.message}

    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    logger.warning(
        f"HTTP exception: {exc.status_code} - {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, "HTTP_ERROR", str(exc.detail), {}),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    formatted_errors = []
    for error in exc.errors():
        # drop the leading "body"/"query" segment so field names match the form
        loc = [str(part) for part in error.get("loc", [])]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]

        input_value = error.get("input")
        try:
            json.dumps(input_value)
        except (TypeError, ValueError):
            input_value = str(input_value)

        formatted_errors.append(
            {
                "field": ".".join(loc),
                "message": error.get("msg", "Validation error"),
                "type": error.get("type", "value_error"),
                "input": input_value,
            }
        )

    logger.warning(
        f"Validation error: {len(formatted_errors)} field(s)",
        extra={
            "errors": formatted_errors,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            request,
            "VALIDATION_ERROR",
            f"Validation failed for {len(formatted_errors)} field(s)",
            {"fields": formatted_errors},
        ),
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    logger.error(
        f"Database error: {type(exc).__name__}",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request, "DATABASE_ERROR", "Database operation failed", {}
        ),
    )


def setup_exception_handlers(app: FastAPI):
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
