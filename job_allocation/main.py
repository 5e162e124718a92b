"""
Main application entry point.
"""

from job_allocation.api.app import create_app
from job_allocation.config.logging import get_logger
from job_allocation.config.settings import settings

logger = get_logger(__name__)

# Create the main app
app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    logger.info("Starting Compliance Job Allocation server", port=settings.API_PORT)

    uvicorn.run(
        "job_allocation.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
