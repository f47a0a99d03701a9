import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...domain.errors import AuthError, ErrorKind

logger = structlog.get_logger()


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        field = loc[-1] if loc else "body"
        messages.append(f"{field}: {err.get('msg', 'invalid value')}")
    return ", ".join(messages) or "Invalid input"


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.kind.value)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "error": exc.kind.value},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": _validation_message(exc), "error": ErrorKind.VALIDATION.value},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # детали только в лог, клиенту отдаём общее сообщение
    logger.error("unhandled_error", path=request.url.path, error=exc.__class__.__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
