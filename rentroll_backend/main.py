"""RentRoll backend - Main Application Entry Point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .core.exceptions import RentRollException
from .core.logging import (
    RequestLoggingMiddleware,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .database import import_models
from .modules.auth.routers import router as users_router
from .modules.commons import BaseResponse, ErrorDetail
from .modules.property_management.routers import router as properties_router
from .modules.rent_management.routers import payments_router, schedules_router
from .modules.tenant_management.routers import router as tenants_router

logger = get_logger(__name__)

import_models()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(settings)
    logger.info("Starting RentRoll application...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug mode: {settings.app_debug}")
    yield
    logger.info("Shutting down RentRoll application...")
    shutdown_logging()


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description="Role-scoped rental property, tenant, rent and payment management",
    version=settings.api_version,
    docs_url=f"{settings.api_prefix}/docs" if settings.app_debug else None,
    redoc_url=f"{settings.api_prefix}/redoc" if settings.app_debug else None,
    openapi_url=f"{settings.api_prefix}/openapi.json" if settings.app_debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID propagation and access logging
app.add_middleware(RequestLoggingMiddleware)


def error_response(
    status_code: int, kind: str, message: str, details: dict | None = None
) -> JSONResponse:
    """Failure envelope shared by every exception handler."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            BaseResponse(
                success=False,
                message=message,
                error=ErrorDetail(
                    kind=kind, message=message, details=jsonable_encoder(details or {})
                ),
            )
        ),
    )


@app.exception_handler(RentRollException)
async def rentroll_exception_handler(request: Request, exc: RentRollException):
    """Handle domain exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.kind}: {exc.message}", exc_info=exc)
    return error_response(exc.status_code, exc.kind, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests with the domain validation kind."""
    return error_response(
        422,
        "validation_failed",
        "Request validation failed",
        {"errors": exc.errors()},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Storage failures are reported as internal errors and never retried."""
    logger.exception(f"Database error: {exc}")
    return error_response(
        500,
        "internal_error",
        str(exc) if settings.app_debug else "Internal server error",
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return error_response(
        500,
        "internal_error",
        str(exc) if settings.app_debug else "Internal server error",
    )


# Health check endpoint
@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.api_version,
        "env": settings.app_env,
    }


# Register routers with the API prefix
app.include_router(users_router, prefix=settings.api_prefix)
app.include_router(properties_router, prefix=settings.api_prefix)
app.include_router(tenants_router, prefix=settings.api_prefix)
app.include_router(schedules_router, prefix=settings.api_prefix)
app.include_router(payments_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rentroll_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_debug,
    )
