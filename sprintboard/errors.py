"""Unified error taxonomy for sprintboard services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceError(Exception):
    code: str
    detail: str
    status_code: int = 400
    retryable: bool = False

    def __str__(self) -> str:
        return self.detail


class InvalidArgumentError(ServiceError):
    def __init__(self, detail: str, code: str = "invalid_argument"):
        super().__init__(code=code, detail=detail, status_code=400, retryable=False)


class PermissionDeniedError(ServiceError):
    def __init__(self, detail: str, code: str = "permission_denied"):
        super().__init__(code=code, detail=detail, status_code=403, retryable=False)


class NotFoundError(ServiceError):
    def __init__(self, detail: str, code: str = "not_found"):
        super().__init__(code=code, detail=detail, status_code=404, retryable=False)


class ConflictError(ServiceError):
    def __init__(self, detail: str, code: str = "conflict"):
        super().__init__(code=code, detail=detail, status_code=409, retryable=False)


class InternalError(ServiceError):
    def __init__(self, detail: str, code: str = "internal", retryable: bool = True):
        super().__init__(code=code, detail=detail, status_code=500, retryable=retryable)


def format_validation_errors(exc: RequestValidationError | ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def _service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error("request_failed path=%s code=%s detail=%s", request.url.path, exc.code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"code": "invalid_argument", "detail": format_validation_errors(exc)},
        )
