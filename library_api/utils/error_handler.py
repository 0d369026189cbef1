"""
Exception handlers rendering every error as a ``{Message}`` JSON body.

Handlers raise `AppException` subclasses (directly or through
`ServiceResult.unwrap()`); the handlers registered here turn them, and
framework errors, into responses. Unexpected exceptions become a generic
500 without exposing details.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_api.exceptions import AppException, RequestValidationFailed
from library_api.logging import logger

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred."


async def app_exception_handler(
    request: Request, ex: AppException
) -> JSONResponse:
    logger.warning(
        f"{type(ex).__name__} on {request.method} {request.url.path}: {ex.message}",
        extra={"exception_type": type(ex).__name__},
    )
    content: dict = {"Message": ex.message}
    if isinstance(ex, RequestValidationFailed):
        content["Errors"] = ex.errors
    return JSONResponse(status_code=ex.http_status, content=content)


async def http_exception_handler(
    request: Request, ex: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=ex.status_code,
        content={"Message": str(ex.detail)},
        headers=getattr(ex, "headers", None),
    )


async def request_validation_handler(
    request: Request, ex: RequestValidationError
) -> JSONResponse:
    logger.warning(f"Malformed request to {request.url.path}: {ex.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"Message": "Invalid request structure."},
    )


async def unhandled_exception_handler(
    request: Request, ex: Exception
) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {ex}",
        exc_info=ex,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"Message": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
