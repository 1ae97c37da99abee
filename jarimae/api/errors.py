"""Exception handlers returning the ``{"error": {"code", "message"}}`` envelope"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from jarimae.booking.errors import ReservationError

logger = structlog.get_logger()

HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def error_body(code: str, message: str, details: Optional[Any] = None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


def _flatten_detail(detail: Any) -> str:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict):
        return "; ".join(f"{key}: {value}" for key, value in detail.items())
    if detail is None:
        return "An error occurred"
    return str(detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for business, HTTP, validation and unexpected errors"""

    @app.exception_handler(ReservationError)
    async def reservation_error_handler(request: Request, exc: ReservationError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Reservation request failed", code=exc.code, path=request.url.path)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        response = JSONResponse(
            status_code=exc.status_code,
            content=error_body(code, _flatten_detail(exc.detail)),
        )
        if exc.headers:
            for key, value in exc.headers.items():
                response.headers[key] = value
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = []
        for error in exc.errors():
            location = [str(loc) for loc in error.get("loc", []) if loc != "body"]
            details.append({"field": ".".join(location), "message": error.get("msg", "Invalid input")})
        return JSONResponse(
            status_code=422,
            content=error_body("VALIDATION_ERROR", "Request validation failed", details),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error", method=request.method, path=request.url.path)
        return JSONResponse(status_code=500, content=error_body("DATABASE_ERROR", "A database error occurred"))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception", method=request.method, path=request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_body("INTERNAL_SERVER_ERROR", "Internal server error"),
        )
