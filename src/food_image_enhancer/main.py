"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from food_image_enhancer.api.routes import enhance
from food_image_enhancer.core.config import get_settings
from food_image_enhancer.core.exceptions import STATUS_CODES, EnhancerError, ErrorKind
from food_image_enhancer.models.enhance import EnhancementOutcome
from food_image_enhancer.services.endpoint_registry import get_endpoint_registry
from food_image_enhancer.services.inference import get_inference_client

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.api_version}")
    logger.info(f"Inference endpoints under {settings.inference_base_url}")

    yield

    logger.info("Shutting down...")
    await get_inference_client().close()
    logger.info("Inference client closed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        description="Food photo generation and enhancement backed by hosted inference models",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(EnhancerError)
    async def enhancer_error_handler(request: Request, exc: EnhancerError):
        """Render enhancer errors raised outside the service as error outcomes."""
        outcome = EnhancementOutcome(
            status="error",
            error_kind=exc.kind,
            message=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=outcome.model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Report missing or malformed form fields in the error outcome shape."""
        fields = [".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()]
        outcome = EnhancementOutcome(
            status="error",
            error_kind=ErrorKind.VALIDATION_ERROR,
            message=f"Missing or invalid fields: {', '.join(fields)}",
        )
        return JSONResponse(
            status_code=STATUS_CODES[ErrorKind.VALIDATION_ERROR],
            content=outcome.model_dump(mode="json"),
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.api_version,
            "models": {
                d.mode.value: d.model_id for d in get_endpoint_registry().all()
            },
        }

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "/enhance/options": "GET - Edit modes and food categories",
                "/enhance": "POST - Enhance and return a data URL",
                "/enhance/image": "POST - Enhance and return image bytes",
            },
        }

    # Include routers
    app.include_router(enhance.router, prefix="/enhance", tags=["Enhance"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "food_image_enhancer.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )
