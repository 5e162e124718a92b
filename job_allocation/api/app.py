"""
FastAPI application factory.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from job_allocation.api.dependencies import close_dependencies
from job_allocation.api.middleware.error_handler import ErrorHandlerMiddleware
from job_allocation.api.middleware.logging import LoggingMiddleware
from job_allocation.api.routes import allocation, health, jobs, technicians
from job_allocation.config.logging import configure_logging, get_logger
from job_allocation.config.settings import settings

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Dispatcher and technician job allocation for property compliance work",
        openapi_url=(
            f"{settings.API_PREFIX}/openapi.json" if settings.ENABLE_SWAGGER else None
        ),
        docs_url=f"{settings.API_PREFIX}/docs" if settings.ENABLE_SWAGGER else None,
        redoc_url=f"{settings.API_PREFIX}/redoc" if settings.ENABLE_SWAGGER else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    ErrorHandlerMiddleware(app)
    LoggingMiddleware(app)

    # Add routes
    app.include_router(health.router, prefix=settings.API_PREFIX)
    app.include_router(allocation.router, prefix=settings.API_PREFIX)
    app.include_router(jobs.router, prefix=settings.API_PREFIX)
    app.include_router(technicians.router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    async def startup_event():
        configure_logging()
        logger.info(
            "Application startup",
            environment=settings.ENVIRONMENT,
            in_memory_gateway=settings.USE_IN_MEMORY_GATEWAY,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        await close_dependencies()
        logger.info("Application shutdown")

    return app
