"""Chit Chat API - Main Application Module.

This module initializes the FastAPI application with proper configuration,
middleware, routing, and lifecycle management for the conversational chat
service.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import ConfigValidator, get_config_summary, settings
from app.core.logging import setup_logging
from app.database import AsyncSessionLocal, engine
from app.exceptions.generation import GenerationConfigurationError
from app.services.generation import GeminiGenerator
from models import Base

logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle events."""
    # Startup
    setup_logging(settings)
    logger.info("Starting %s %s (%s)", settings.app_name, settings.version, settings.environment.value)
    logger.debug("Configuration: %s", get_config_summary())
    if settings.is_production:
        ConfigValidator.validate_required_settings()

    # Development mode: Auto-create tables if they don't exist
    # Production: Use Alembic migrations (alembic upgrade head)
    if settings.is_development:
        logger.info("Development mode: creating/updating database tables")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        logger.info("Use 'alembic upgrade head' to manage the database schema")

    app.state.generator = None
    if settings.has_ai_enabled:
        try:
            app.state.generator = GeminiGenerator(settings.generation_config())
        except GenerationConfigurationError as e:
            logger.error("Text generation disabled: %s", e.message)
    else:
        logger.warning("GEMINI_API_KEY not set, chat turns will fail until it is configured")

    yield

    # Shutdown
    logger.info("Shutting down %s", settings.app_name)
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Conversational chat assistant with persistent, named conversations",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
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
    # Credentials are required for the session cookie
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
        response = await call_next(request)
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

        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, message, error_code)

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": "error",
                "message": message,
                "error_code": error_code,
                "details": details,
                "timestamp": _utc_timestamp(),
                "request_id": getattr(request.state, "request_id", None),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Convert errors to JSON-serializable format
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": error.get("loc", []),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            # Handle custom input if present
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        return JSONResponse(
            status_code=422,
            content={
                "status": "error",
                "message": "Validation error",
                "error_code": "VALIDATION_ERROR",
                "details": errors,
                "timestamp": _utc_timestamp(),
                "request_id": getattr(request.state, "request_id", None),
            },
        )


def setup_routers(app: FastAPI):
    """Configure application routers."""
    # Import routers
    from app.domains.chat.controller import router as chat_router
    from app.domains.user.controller import router as user_router

    @app.get("/health")
    async def health_check(request: Request):
        """Report database and text generation status."""
        try:
            db_status = "healthy"
            try:
                async with AsyncSessionLocal() as db:
                    await db.execute(text("SELECT 1"))
            except Exception as e:
                logger.warning("Health check database probe failed: %s", str(e))
                db_status = "unhealthy"

            if getattr(request.app.state, "generator", None) is not None:
                ai_status = "healthy"
            else:
                ai_status = "not_configured"

            return {
                "status": "healthy" if db_status == "healthy" else "degraded",
                "version": settings.version,
                "environment": settings.environment.value,
                "timestamp": _utc_timestamp(),
                "services": {
                    "database": db_status,
                    "ai_service": ai_status,
                },
            }
        except Exception as e:
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "message": f"Health check failed: {str(e)}",
                    "timestamp": _utc_timestamp(),
                },
            )

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": "Conversational chat assistant",
            "docs_url": "/docs" if settings.is_development else None,
        }

    # Include domain routers
    app.include_router(user_router)
    app.include_router(chat_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
