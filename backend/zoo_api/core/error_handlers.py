"""
Exception handlers that map domain and infrastructure errors to responses.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from zoo_api.core.errors import InternalError, ValidationError, ZooError

logger = logging.getLogger(__name__)


def _format_location(loc: tuple) -> str:
    # Drop the leading "body"/"query" segment FastAPI adds
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def register_error_handlers(app: FastAPI) -> None:
    """Attach error handlers to the application."""

    @app.exception_handler(ZooError)
    async def handle_zoo_error(request: Request, exc: ZooError) -> JSONResponse:
        logger.info(
            "%s %s -> %d %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.code,
            exc.message,
        )
        payload = {"code": exc.code, "detail": exc.message}
        if exc.errors:
            payload["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {"field": _format_location(tuple(err.get("loc", ()))), "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        message = "; ".join(f"{e['field']}: {e['message']}" for e in errors) or "Invalid request"
        return await handle_zoo_error(request, ValidationError(message, errors=errors))

    @app.exception_handler(PyMongoError)
    async def handle_database_error(request: Request, exc: PyMongoError) -> JSONResponse:
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        error = InternalError("Database unavailable, please retry")
        return JSONResponse(
            status_code=error.status_code,
            content={"code": error.code, "detail": error.message},
        )

    @app.exception_handler(RedisError)
    async def handle_cache_error(request: Request, exc: RedisError) -> JSONResponse:
        logger.error("Redis error on %s %s", request.method, request.url.path, exc_info=exc)
        error = InternalError("Session store unavailable, please retry")
        return JSONResponse(
            status_code=error.status_code,
            content={"code": error.code, "detail": error.message},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        error = InternalError("Something went wrong")
        return JSONResponse(
            status_code=error.status_code,
            content={"code": error.code, "detail": error.message},
        )
