"""FastAPI application entry point.

Main application setup with middleware, routing and error handling.
"""

import logging

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prefix_swap import __version__
from prefix_swap.api.schemas import ErrorResponse
from prefix_swap.api.templates import router as templates_router
from prefix_swap.core.config import Settings, get_settings
from prefix_swap.core.exceptions import PrefixSwapError
from prefix_swap.core.logging_config import setup_logging

# Initialize logging before importing other modules
setup_logging()
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Template Prefix Swap",
        description="Preview template fields and prepare prefix renaming runs",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Store settings in app state and make routes use them
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(templates_router)
    logger.info("Registered templates router")

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "service": "template-prefix-swap",
            "version": __version__,
        }

    # Exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        """Render HTTP errors in the {success, message} shape the front end reads."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=str(exc.detail)).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Handle Pydantic validation errors."""
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "message": "Validation error",
                "errors": exc.errors(),
            },
        )

    @app.exception_handler(PrefixSwapError)
    async def prefix_swap_exception_handler(request, exc):
        """Report pipeline errors that escaped a route as bad requests."""
        logger.warning(f"Request failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(message=str(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(message="Internal server error").model_dump(),
        )

    logger.info("FastAPI application created successfully")
    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info(f"Starting uvicorn server on port {settings.port}...")
    uvicorn.run(
        "prefix_swap.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
