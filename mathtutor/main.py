"""
Main FastAPI application factory.
"""
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mathtutor import __version__
from mathtutor.api import dependencies
from mathtutor.api.routers import problems
from mathtutor.api.routers import settings as settings_router
from mathtutor.core.providers.factory import create_provider
from mathtutor.schemas.response import ErrorResponse, HealthResponse
from mathtutor.settings import settings
from mathtutor.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{__version__}")

    dependencies.init_services()
    logger.info(f"Problem repository initialized: {settings.repository_backend}")

    if not await dependencies.repository.ping():
        logger.error("Problem repository is not reachable")

    # Test provider initialization; a missing key only degrades generator-backed endpoints
    try:
        provider = create_provider()
        logger.info(f"Provider initialized: {provider.__class__.__name__}")
    except Exception as e:
        logger.warning(f"Provider initialization test failed: {e}")

    yield

    logger.info("Shutting down...")
    await dependencies.shutdown_services()


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="Math tutor service: problem generation, answer evaluation and guidance",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    cors_origins = settings.cors_origins.split(",") if settings.cors_origins else ["http://localhost:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.opt(exception=exc).error(f"Unhandled exception: {exc}")

        request_id = getattr(request.state, "request_id", None)

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="InternalServerError",
                message="An unexpected error occurred",
                detail=str(exc) if settings.debug else None,
                request_id=request_id,
            ).model_dump(),
        )

    app.include_router(problems.router, prefix=settings.api_v1_str)
    app.include_router(settings_router.router, prefix=settings.api_v1_str)

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else None,
        }

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check():
        """
        Health check endpoint.

        Reports whether the generator provider can be built and the
        repository answers.
        """
        health = HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now(timezone.utc),
            provider=settings.llm_provider,
            provider_configured=False,
            repository=settings.repository_backend,
            repository_ok=False,
        )

        if dependencies.repository is not None:
            health.repository_ok = await dependencies.repository.ping()
        if not health.repository_ok:
            health.status = "degraded"

        try:
            create_provider()
            health.provider_configured = True
        except Exception as e:
            logger.error(f"Provider {settings.llm_provider} health check failed: {e}")
            health.status = "degraded"

        return health

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID to all requests."""
        request_id = request.headers.get("X-Request-ID")
        if not request_id:
            request_id = f"req_{uuid.uuid4().hex[:12]}"

        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response

    return app


# In production, use: uvicorn mathtutor.main:create_app --factory
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mathtutor.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
