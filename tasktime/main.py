# TaskTime - Main Application
# FastAPI application factory and startup

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tasktime.config import get_settings
from tasktime.database import check_connection
from tasktime.errors import TimeTrackingError


settings = get_settings()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from settings (no-op if already configured)."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events.

    Runs on startup and shutdown.
    """
    # Startup
    logger.info("Starting %s...", settings.app_name)

    # Verify database connection
    try:
        check_connection()
        logger.info("Database connection: OK")
    except Exception as e:
        logger.error("Database connection: FAILED - %s", e)
        if not settings.debug:
            raise

    yield

    # Shutdown
    logger.info("Shutting down %s...", settings.app_name)


async def time_tracking_error_handler(request: Request, exc: TimeTrackingError) -> JSONResponse:
    """Map the time-tracking error taxonomy onto HTTP responses."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Time tracking for project tasks",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_exception_handler(TimeTrackingError, time_tracking_error_handler)

    # Include routers
    from tasktime.routes import entries
    app.include_router(entries.router)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint for monitoring."""
        try:
            check_connection()
            db_status = "healthy"
        except Exception as e:
            db_status = f"unhealthy: {e}"

        return {
            "status": "ok",
            "app": settings.app_name,
            "database": db_status,
        }

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tasktime.main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.debug,
    )
