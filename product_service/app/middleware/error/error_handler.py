"""
Error handling middleware for Product Service.
Every failure is returned in the ``{success, message, data}`` envelope.
"""

import traceback
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...core.exceptions import ProductServiceError
from ...utils.logging import setup_product_logging

logger = setup_product_logging("product_service_error_handler")


class ProductServiceErrorHandler:
    """
    Centralized error handling for Product Service.

    - domain errors map to the status code they carry (404, 403, 400)
    - request validation failures become 400 with the offending fields
    - store failures become 503
    - anything else becomes 500 and is logged with its traceback
    """

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        """
        Setup all error handlers for the FastAPI application.
        """

        @app.exception_handler(ProductServiceError)
        async def product_service_error_handler(
            request: Request, exc: ProductServiceError
        ) -> JSONResponse:
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type=exc.error_type,
                message=exc.message,
            )

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                error_type="http_error",
                message=str(exc.detail),
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=400,
                error_type="validation_error",
                message=ProductServiceErrorHandler._summarize_errors(exc.errors()),
            )

        @app.exception_handler(ValidationError)
        async def pydantic_validation_exception_handler(
            request: Request, exc: ValidationError
        ) -> JSONResponse:
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=400,
                error_type="data_validation_error",
                message=ProductServiceErrorHandler._summarize_errors(exc.errors()),
            )

        @app.exception_handler(SQLAlchemyError)
        async def database_error_handler(
            request: Request, exc: SQLAlchemyError
        ) -> JSONResponse:
            logger.error(
                "Product store error",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "user_id": getattr(request.state, "user_id", None),
                    "event_type": "database_error",
                },
                exc_info=exc,
            )
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=503,
                error_type="store_unavailable",
                message="Product store is unavailable",
            )

        @app.exception_handler(Exception)
        async def unhandled_exception_handler(
            request: Request, exc: Exception
        ) -> JSONResponse:
            logger.error(
                "Unhandled exception occurred",
                extra={
                    "user_id": getattr(request.state, "user_id", None),
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": "".join(traceback.format_exception(exc)),
                    "event_type": "unhandled_exception",
                },
            )
            return ProductServiceErrorHandler._create_error_response(
                request=request,
                status_code=500,
                error_type="internal_server_error",
                message="An internal server error occurred",
            )

    @staticmethod
    def _summarize_errors(errors: List[Dict[str, Any]]) -> str:
        parts = []
        for error in errors:
            location = [str(loc) for loc in error.get("loc", ()) if loc != "body"]
            field = ".".join(location)
            parts.append(f"{field}: {error['msg']}" if field else error["msg"])
        return "; ".join(parts) or "Request validation failed"

    @staticmethod
    def _create_error_response(
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
    ) -> JSONResponse:
        """
        Create the failure envelope.

        Args:
            request: The FastAPI request object
            status_code: HTTP status code
            error_type: Type of error for categorization (logged only)
            message: Human-readable error message
        """
        if status_code < 500:
            logger.warning(
                f"Client error: {error_type}",
                extra={
                    "user_id": getattr(request.state, "user_id", None),
                    "status_code": status_code,
                    "error_type": error_type,
                    "error_message": message,
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "client_error",
                },
            )

        return JSONResponse(
            status_code=status_code,
            content={"success": False, "message": message, "data": None},
        )


def setup_product_error_handling(app: FastAPI) -> None:
    """
    Convenience function to setup error handling for Product Service.
    """
    ProductServiceErrorHandler.setup_error_handlers(app)
    logger.info(
        "Product Service error handling configured",
        extra={"event_type": "error_handler_setup"},
    )
