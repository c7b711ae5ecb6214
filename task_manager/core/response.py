import traceback

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Optional

from task_manager.core.config import settings
from task_manager.core.errors import ValidationError
from task_manager.core.logger import logger

_VALUE_ERROR_PREFIX = "Value error, "


def success(data: Any, message: str = "Success", status_code: int = 200, count: Optional[int] = None) -> JSONResponse:
    content = {
        "success": True,
        "message": message,
        "data": jsonable_encoder(data),
    }
    if count is not None:
        content["count"] = count
    return JSONResponse(status_code=status_code, content=content)


def error(message: str, status_code: int, data: Any = None, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "data": data,
            **extra,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Catches all HTTPException (AppError subclasses included) and wraps them."""
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        # router miss, not a handler-raised NotFound
        message = "Route not found"
    return error(str(message), exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Catches Pydantic validation errors.
    Returns ONE clean 400 response carrying the first error message.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    msg = first.get("msg", "Invalid input")

    if msg.startswith(_VALUE_ERROR_PREFIX):
        # our own validators already phrase the full message
        message = msg[len(_VALUE_ERROR_PREFIX):]
    else:
        field = ".".join(str(l) for l in first.get("loc", []) if l not in ("body", "query", "path"))
        message = f"Validation error on '{field}': {msg}" if field else msg

    return error(message, ValidationError.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    app_settings = getattr(request.app.state, "settings", settings)
    extra = {}
    if not app_settings.is_production:
        extra["error"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return error(str(exc) or "Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR, **extra)
