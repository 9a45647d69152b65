from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
import logging
from typing import Sequence, Any

from hearth.schemas.result import Error, Result, ErrorCategory
from hearth.core.exception import CustomException

logger = logging.getLogger(__name__)


class ExceptionHandlingMiddleware(BaseHTTPMiddleware):
    """
    Centralized exception handling middleware for consistent API responses.
    Catches all exceptions and transforms them into standardized Result objects.

    Domain exceptions are normally answered by the handlers installed through
    register_exception_handlers; this middleware is the outer safety net.
    """

    def __init__(self, app, log_internal_errors: bool = True):
        super().__init__(app)
        self.log_internal_errors = log_internal_errors
        self._register_handlers()

    def _register_handlers(self):
        """Register exception type to handler method mappings"""
        self.EXCEPTION_HANDLERS = {
            CustomException: self._handle_custom_exception,
            ValidationError: self._handle_validation_error,
            RequestValidationError: self._handle_validation_error,
            ResponseValidationError: self._handle_validation_error,
            IntegrityError: self._handle_integrity_error,
            StarletteHTTPException: self._handle_http_exception,
        }

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as ex:
            return await self._handle_exception(ex, request)

    async def _handle_exception(self, ex: Exception, request: Request) -> JSONResponse:
        """
        Route exception to the appropriate handler.

        All registered handlers are expected to be asynchronous (async def).
        """
        for exc_type, handler in self.EXCEPTION_HANDLERS.items():
            if isinstance(ex, exc_type):
                return await handler(ex, request)

        return await self._handle_unhandled_exception(ex, request)

    async def _handle_custom_exception(
        self, ex: CustomException, request: Request
    ) -> JSONResponse:
        """Handle custom application exceptions"""
        if ex.status_code >= 500:
            logger.error(
                f"{ex.category.value} on {request.method} {request.url.path}: {ex.detail}"
            )
        error = Error(
            message=ex.detail, status_code=ex.status_code, category=ex.category
        )
        return create_error_response(error, headers=ex.headers)

    async def _handle_validation_error(
        self,
        ex: ValidationError | RequestValidationError | ResponseValidationError,
        request: Request,
    ) -> JSONResponse:
        """Handle Pydantic validation errors"""
        error = Error(
            message=format_validation_error(ex.errors()),
            status_code=422,
            category=ErrorCategory.VALIDATION,
        )
        return create_error_response(error)

    async def _handle_integrity_error(
        self, ex: IntegrityError, request: Request
    ) -> JSONResponse:
        """Unique constraint races surface as conflicts"""
        logger.warning(
            f"Integrity error on {request.method} {request.url.path}: {ex.orig}"
        )
        error = Error(
            message="The resource conflicts with an existing record.",
            status_code=409,
            category=ErrorCategory.RESOURCE_CONFLICT,
        )
        return create_error_response(error)

    async def _handle_http_exception(
        self, ex: StarletteHTTPException, request: Request
    ) -> JSONResponse:
        """Handle FastAPI and Starlette HTTP exceptions"""
        error = Error(
            message=ex.detail if isinstance(ex.detail, str) else str(ex.detail),
            status_code=ex.status_code,
            category=ErrorCategory.from_status_code(ex.status_code),
        )
        return create_error_response(error, headers=getattr(ex, "headers", None))

    async def _handle_unhandled_exception(
        self, ex: Exception, request: Request
    ) -> JSONResponse:
        """Handle unexpected exceptions"""
        if self.log_internal_errors:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}",
                exc_info=ex,
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "client": request.client.host if request.client else None,
                },
            )

        # Don't expose internal error details in production
        error = Error(
            message="An unexpected error occurred. Please try again later.",
            status_code=500,
            category=ErrorCategory.INTERNAL,
        )
        return create_error_response(error)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install Result-envelope handlers for exceptions FastAPI would otherwise
    answer itself (HTTPException subclasses and request validation errors).
    """
    translator = ExceptionHandlingMiddleware(app, log_internal_errors=True)

    async def _dispatch(request: Request, exc: Exception) -> JSONResponse:
        return await translator._handle_exception(exc, request)

    app.add_exception_handler(CustomException, _dispatch)
    app.add_exception_handler(StarletteHTTPException, _dispatch)
    app.add_exception_handler(RequestValidationError, _dispatch)
    app.add_exception_handler(ValidationError, _dispatch)
    app.add_exception_handler(IntegrityError, _dispatch)


def create_error_response(error: Error, headers: dict | None = None) -> JSONResponse:
    """Create standardized JSON error response"""
    return JSONResponse(
        status_code=error.status_code,
        content=Result.failure(error).model_dump(),
        headers=headers,
    )


def format_validation_error(errors: Sequence[Any]) -> str:
    """Format validation errors into human-readable message"""
    messages = []
    for error in errors:
        loc = " -> ".join(str(loc) for loc in error.get("loc", []))
        msg = error.get("msg", "Unknown error")
        error_type = error.get("type", "unknown")

        messages.append(f"Error in {loc}: {msg} (type: {error_type})")

    return "; ".join(messages) if messages else "Validation failed"
