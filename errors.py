"""
Error envelope and exception mapping.

Every failure leaves the API as ``{"success": false, "error": "<message>"}``:
- ApiError (400/404) carries a user-facing message
- request validation errors become 400 naming the offending field
- anything else becomes 500 with the underlying message, or the
  per-operation fallback when the exception has none
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    def __init__(self, status_code: int, message: str):
        super().__init__(status_code=status_code, detail=message)


def bad_request(message: str) -> ApiError:
    return ApiError(400, message)


def not_found(entity: str) -> ApiError:
    return ApiError(404, f"{entity} not found")


def invalid_id(entity: str) -> ApiError:
    return ApiError(400, f"Invalid {entity.lower()} ID")


@contextmanager
def failure_message(fallback: str) -> Iterator[None]:
    """Run one handler body; unexpected exceptions become a 500 ApiError."""
    try:
        yield
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception(fallback)
        raise ApiError(500, str(exc) or fallback) from exc


def error_body(message: str) -> dict:
    return {"success": False, "error": message}


def describe_validation_error(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    field = ".".join(loc)
    if error.get("type") == "json_invalid":
        return "Invalid JSON body"
    if error.get("type") == "missing" and field:
        return f"{field} is required"
    if field:
        return f"Invalid value for {field}: {error.get('msg')}"
    return error.get("msg") or "Invalid request"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(error_body(str(exc.detail)), status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = describe_validation_error(errors[0]) if errors else "Invalid request"
    return JSONResponse(error_body(message), status_code=400)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(error_body(str(exc) or "Internal server error"), status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
