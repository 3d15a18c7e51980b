"""Maps domain errors onto HTTP responses with the ``{success, message}`` envelope."""

from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.exceptions import (
    AccountNotFound,
    AccountNotVerified,
    AlreadyVerified,
    ConflictAlreadyRegistered,
    DeliveryError,
    EmailAlreadyTaken,
    Forbidden,
    InvalidCredentials,
    InvalidToken,
    MeetmaxError,
    MissingToken,
    RateLimited,
    Unauthorized,
    ValidationError,
)

STATUS_CODES: Dict[Type[MeetmaxError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictAlreadyRegistered: status.HTTP_409_CONFLICT,
    EmailAlreadyTaken: status.HTTP_409_CONFLICT,
    AccountNotFound: status.HTTP_400_BAD_REQUEST,
    AccountNotVerified: status.HTTP_401_UNAUTHORIZED,
    AlreadyVerified: status.HTTP_400_BAD_REQUEST,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    MissingToken: 422,
    InvalidToken: status.HTTP_403_FORBIDDEN,
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    DeliveryError: status.HTTP_502_BAD_GATEWAY,
    RateLimited: status.HTTP_429_TOO_MANY_REQUESTS,
}


def status_code_for(exc: MeetmaxError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return status.HTTP_400_BAD_REQUEST


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


async def _handle_meetmax_error(request: Request, exc: MeetmaxError) -> JSONResponse:
    headers = None
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(error_body(exc.message), status_code=status_code_for(exc), headers=headers)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = "; ".join(problems) or "Invalid request"
    return JSONResponse(error_body(message), status_code=status.HTTP_400_BAD_REQUEST)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Route not available"
    else:
        message = str(exc.detail)
    return JSONResponse(
        error_body(message),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MeetmaxError, _handle_meetmax_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
