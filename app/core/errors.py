"""Error taxonomy and the handlers that turn it into JSON responses.

Every error keeps the ``{"error", "message", "details"}`` detail shape used
across the API; the handlers flatten it into the response body.
"""
import logging
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "InternalError"

    def __init__(self, message: str, details: Optional[List[dict]] = None, headers: Optional[dict] = None):
        self.message = message
        self.details = details or []
        super().__init__(
            status_code=self.status_code,
            detail={"error": self.error, "message": message, "details": self.details},
            headers=headers,
        )


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "ValidationError"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "AuthenticationError"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "AuthorizationError"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "NotFound"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "ConflictError"


class InternalError(AppError):
    pass


def field_error(field: str, message: str) -> List[dict]:
    return [{"field": field, "message": message}]


def _body(error: str, message: str, details: Any = None) -> dict:
    return {"error": error, "message": message, "details": details or []}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = _body(exc.detail["error"], exc.detail.get("message", ""), exc.detail.get("details"))
    else:
        content = _body("HTTPError", str(exc.detail))
    if exc.status_code >= 500 and not settings.is_development:
        content = _body(content["error"], "Internal server error")
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        loc = list(error.get("loc", []))
        # Drop the request part, keep the model field path
        if loc and loc[0] == "body":
            loc = loc[1:]
        details += field_error(".".join(str(part) for part in loc), error.get("msg", "Invalid value"))
    message = details[0]["message"] if len(details) == 1 else "Invalid request data"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_body(ValidationError.error, message, details),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.is_development else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_body(InternalError.error, message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
