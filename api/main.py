"""
Gym Sync API

A FastAPI-based surface for the gym reconciliation core.
Lets interactive tools trigger a sync pass, validate records and query
the remote business units collection, always with structured results.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.core.config import settings
from api.models.schemas import ErrorResponse, HealthResponse
from api.routes import gyms

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic for the application.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Remote endpoint: {settings.client_config().endpoint}")

    yield

    logger.info("Shutting down application")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="""
Gym Sync API reconciles the local Boulders gym catalog with the BRP business units API.

## Features

* **Sync** - Create or update every gym and get one outcome per gym
* **Validation** - Check a record before it is sent
* **Queries** - Look up gyms by id or search by name, city and street
    """,
    version=settings.app_version,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request Timing Middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = time.perf_counter() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    return response


# Request Logging Middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests."""
    logger.debug(f"{request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"{request.method} {request.url.path} - {response.status_code}")
    return response


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    if isinstance(exc.detail, dict):
        # Structured gym sync errors keep their fields
        error = exc.detail.get("error", "Error")
        detail = exc.detail
    else:
        error = str(exc.detail)
        detail = None

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=error,
            detail=detail,
            status_code=exc.status_code,
        ).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle request validation errors with details."""
    error_messages = []

    for error in exc.errors():
        loc = " -> ".join(str(x) for x in error["loc"])
        error_messages.append(f"{loc}: {error['msg']}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="Validation Error",
            detail="; ".join(error_messages),
            status_code=422,
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")

    # Don't expose internal errors in production
    if settings.environment == "production":
        detail = "An unexpected error occurred"
    else:
        detail = str(exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal Server Error",
            detail=detail,
            status_code=500,
        ).model_dump(),
    )


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check",
    description="Check if the API is running.",
)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Reports the configured upstream endpoint without calling it; use
    /api/v1/gyms/connection to probe the upstream.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        upstream=settings.client_config().endpoint,
    )


# =============================================================================
# API Routes
# =============================================================================

app.include_router(
    gyms.router,
    prefix=settings.api_v1_prefix,
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get(
    "/",
    tags=["Root"],
    summary="API Information",
    description="Get basic API information and links to documentation.",
)
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "documentation": {
            "openapi": "/api/openapi.json",
            "swagger": "/api/docs",
            "redoc": "/api/redoc",
        },
        "endpoints": {
            "sync": f"{settings.api_v1_prefix}/gyms/sync",
            "gyms": f"{settings.api_v1_prefix}/gyms",
            "health": "/health",
        },
    }


# =============================================================================
# Development Server
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
