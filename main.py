"""
Main application file for SML Cars Backend.
Wires configuration, logging, middleware, error handling and the API routers.
"""

import os
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

# Core imports
from core.config import get_settings, validate_required_settings
from core.logging import setup_logging, get_logger
from core.database import db_manager
from core.middleware import (
    RequestLoggingMiddleware,
    ErrorHandlingMiddleware,
    SecurityHeadersMiddleware
)
from core.exceptions import CarDealerException
from services.storage_service import StorageService

# API routes
from api.auth_router import router as auth_router
from api.cars_router import router as cars_router
from api.uploads_router import router as uploads_router

logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""

    logger.info("Starting SML Cars Backend application...")

    try:
        settings = get_settings()
        validate_required_settings(settings)
        logger.info(f"Configuration validated - Environment: {settings.environment.value}")

        os.makedirs(settings.upload_tmp_dir, exist_ok=True)

        if db_manager.test_connection():
            logger.info("Database connection established successfully")
        else:
            logger.warning("Database connection test failed")

        logger.info("Application startup completed successfully")

    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise

    yield

    logger.info("Shutting down SML Cars Backend application...")
    try:
        db_manager.close()
        logger.info("Application shutdown completed successfully")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


def _validation_message(errors: list) -> str:
    missing = [
        str(error["loc"][-1]) for error in errors
        if error.get("type") == "missing" and len(error.get("loc", ())) > 1
    ]
    if missing:
        return f"Missing required fields ({', '.join(missing)})"
    if any(error.get("type") == "missing" for error in errors):
        return "Request body is required"

    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    return f"Invalid value for '{field}': {first.get('msg', 'invalid')}" if field else "Invalid request"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()

    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Car dealership catalog and admin API backed by Supabase",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
        debug=settings.debug
    )

    # Add middleware (last added runs first)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(cars_router)
    app.include_router(uploads_router)

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with basic application information."""
        return {
            "message": "SML Car Rental API - ACTIVE",
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment.value,
            "time": _now()
        }

    @app.get("/api/health", tags=["health"])
    async def health_check():
        """Liveness plus reachability of the document and object stores."""
        database = db_manager.health_check()
        storage = StorageService().health_check()
        healthy = database["ok"] and storage["ok"]

        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "success": healthy,
                "database": database,
                "storage": storage,
                "version": settings.app_version,
                "environment": settings.environment.value,
                "time": _now()
            }
        )

    @app.exception_handler(CarDealerException)
    async def car_dealer_exception_handler(request: Request, exc: CarDealerException):
        request_id = _request_id(request)

        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            f"[{request_id}] {exc.error_code} - {exc.message}",
            extra={"details": exc.details}
        )

        return JSONResponse(status_code=exc.status_code, content=exc.to_response(request_id))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        request_id = _request_id(request)
        errors = exc.errors()
        message = _validation_message(errors)

        logger.warning(f"[{request_id}] VALIDATION_ERROR - {message}")

        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": message,
                "code": "VALIDATION_ERROR",
                "details": {
                    "errors": [
                        {
                            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
                            "message": error.get("msg")
                        }
                        for error in errors
                    ]
                },
                "request_id": request_id
            }
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        content = {"success": False, "error": str(exc.detail), "request_id": _request_id(request)}
        if exc.status_code == 404:
            content.update({"error": "Route not found", "path": request.url.path})

        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        request_id = _request_id(request)

        logger.error(
            f"[{request_id}] Unhandled exception: {str(exc)}",
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "code": "INTERNAL_SERVER_ERROR",
                "request_id": request_id
            }
        )

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    """Run the application directly for development."""
    settings = get_settings()

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
        access_log=True
    )
