"""
Global error handling for the FastAPI application.
Catches and formats all exceptions consistently as ``{error, message}``.
"""

import logging
import traceback
from typing import Any, Dict, Optional, TypeVar

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from timesheet_api.application.use_cases.base_use_case import UseCaseResult, INTERNAL_ERROR_MESSAGE
from timesheet_api.config import settings

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Domain error code -> (HTTP status, error title)
ERROR_STATUS = {
    "VALIDATION_ERROR": (status.HTTP_400_BAD_REQUEST, "Bad Request"),
    "BUSINESS_RULE_VIOLATION": (status.HTTP_400_BAD_REQUEST, "Bad Request"),
    "ENTITY_NOT_FOUND": (status.HTTP_404_NOT_FOUND, "Not Found"),
    "FORBIDDEN": (status.HTTP_403_FORBIDDEN, "Forbidden"),
    "INVALID_TRANSITION": (status.HTTP_409_CONFLICT, "Conflict"),
    "LOCKED_TIMESHEET": (status.HTTP_409_CONFLICT, "Conflict"),
    "DUPLICATE_ENTITY": (status.HTTP_409_CONFLICT, "Conflict"),
    "INTERNAL_ERROR": (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"),
}

HTTP_TITLES = {
    status.HTTP_400_BAD_REQUEST: "Bad Request",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized",
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "Not Found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method Not Allowed",
    status.HTTP_409_CONFLICT: "Conflict",
}


class BusinessException(Exception):
    """
    Exception carrying a failed use case outcome to the HTTP layer.
    """
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.error = error or HTTP_TITLES.get(status_code, "Error")
        self.details = details or {}
        super().__init__(self.message)

    @classmethod
    def from_result(cls, result: UseCaseResult) -> "BusinessException":
        status_code, title = ERROR_STATUS.get(
            result.error_code, ERROR_STATUS["INTERNAL_ERROR"]
        )
        message = result.error if status_code < 500 else INTERNAL_ERROR_MESSAGE
        return cls(message, result.error_code, status_code, title)


def unwrap(result: UseCaseResult[T]) -> T:
    """Return the data of a successful result or raise its HTTP error."""
    if not result.success:
        raise BusinessException.from_result(result)
    return result.data


def _error_body(request: Request, error: str, message: Optional[str], code: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error, "message": message}
    if code:
        body["code"] = code
    if getattr(request.state, "request_id", None):
        body["request_id"] = request.state.request_id
    return body


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        body = _error_body(request, "Internal Server Error", INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR")

        # In development, add more debug information
        if settings.debug:
            body["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


async def business_exception_handler(request: Request, exc: BusinessException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.error, exc.message, exc.error_code),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = f"The path {request.url.path} was not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, HTTP_TITLES.get(exc.status_code, "Error"), message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    body = _error_body(request, "Bad Request", message, "VALIDATION_ERROR")
    body["details"] = {"errors": [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg")} for error in errors
    ]}
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BusinessException, business_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
