"""Map service errors to HTTP responses; anything unclassified becomes a 500."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from userservice.core.exceptions import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)


def endpoint_name(request: Request) -> str:
    """`<module>.<function>` of the route that handled request, or its path if none matched."""
    endpoint = request.scope.get("endpoint")
    if endpoint is None:
        return request.url.path
    module = getattr(endpoint, "__module__", "") or ""
    return f"{module.rsplit('.', 1)[-1]}.{getattr(endpoint, '__name__', repr(endpoint))}"


def internal_error_message(request: Request, exc: Exception) -> str:
    return f"Error occurred in endpoint: {endpoint_name(request)}. Message: {exc}"


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers for ValidationError (400), AuthenticationError (401) and the 500 fallback."""

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("Registration rejected", extra={"error_count": len(exc.errors)})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid input", "errors": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid input", "errors": errors},
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": exc.message},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> PlainTextResponse:
        message = internal_error_message(request, exc)
        logger.exception(message)
        return PlainTextResponse(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
