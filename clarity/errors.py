"""Structured error helpers for API responses."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.headers = headers
        self.payload = build_error_payload(code, message, details)


class ValidationFailed(AppError):
    """Input broke a task or preference rule. Raised before any write."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message, details)


class TaskNotFound(AppError):
    """The task does not exist or belongs to somebody else."""

    def __init__(self, task_id: Any):
        super().__init__(
            status.HTTP_404_NOT_FOUND,
            "TASK_NOT_FOUND",
            "Task not found",
            {"task_id": str(task_id)},
        )


class Unauthorized(AppError):
    def __init__(self, message: str = "Missing or invalid authorization header"):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            "UNAUTHORIZED",
            message,
            headers={"WWW-Authenticate": "Bearer"},
        )


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload, headers=exc.headers)


def _summarize_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    summary = []
    for err in errors:
        summary.append(
            {
                "loc": [str(part) for part in err.get("loc", ())],
                "msg": str(err.get("msg", "")),
                "type": str(err.get("type", "")),
            }
        )
    return summary


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = _summarize_validation_errors(exc.errors())
    message = errors[0]["msg"] if errors else "Invalid request"
    # pydantic prefixes messages raised from validators
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    payload = build_error_payload("VALIDATION_ERROR", message, {"errors": errors})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.info("404 - Route not found: %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_payload(code, message),
        headers=getattr(exc, "headers", None),
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_payload("STORE_ERROR", "The request could not be completed, please retry"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Wire every handler above into the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
