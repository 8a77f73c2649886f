"""Project Tracker API - Main Application Module.

This module initializes the FastAPI application with proper configuration,
middleware, routing, and lifecycle management for the project/task tracker.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import ConfigValidator, settings
from app.core.logging import configure_logging, request_id_var
from app.database import Database
from app.schemas.base import ErrorResponse

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    details=None,
    headers: dict | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details,
        timestamp=_now(),
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle events."""
    # Startup
    configure_logging(settings)
    ConfigValidator.validate_required_settings()
    logger.info("Starting %s (%s)", settings.app_name, settings.environment.value)

    database = Database.from_settings(settings)
    app.state.database = database

    # Development mode: Auto-create tables if they don't exist
    if settings.is_development or settings.is_testing:
        await database.create_all()
        logger.info("Database tables created/verified")

    yield

    # Shutdown
    logger.info("Shutting down %s", settings.app_name)
    await database.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Project and task tracking with role-scoped access",
        version=settings.version,
        lifespan=lifespan,
        docs_url=settings.docs_url if settings.is_development else None,
        redoc_url=settings.redoc_url if settings.is_development else None,
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Handle custom exceptions that have structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"
            details = None

        return _error_response(
            request, exc.status_code, message, error_code, details, getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Convert errors to JSON-serializable format
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        return _error_response(request, 422, "Validation error", "VALIDATION_ERROR", errors)


def setup_routers(app: FastAPI):
    """Configure application routers."""
    from app.database import get_db
    from app.domains.project.controller import router as project_router

    @app.get("/api/health")
    async def health_check(db: AsyncSession = Depends(get_db)):
        """Health check endpoint that also pings the database."""
        db_status = "healthy"
        try:
            await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Health check database ping failed: %s", str(e))
            db_status = "unhealthy"

        body = {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": settings.version,
            "environment": settings.environment.value,
            "timestamp": _now(),
            "services": {"database": db_status},
        }
        return JSONResponse(status_code=200 if db_status == "healthy" else 503, content=body)

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": "Project and task tracking with role-scoped access",
            "docs_url": settings.docs_url if settings.is_development else None,
        }

    # Include domain routers
    app.include_router(project_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development and settings.reload,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
