"""
Book Recommender - Main Application Entry Point

- FastAPI app with lifespan handler
- uvicorn book_recommender.main:app starts successfully

Patterns Applied:
- Lifespan context manager
- One-time configure_logging() at startup

Anti-Patterns Avoided:
- Deprecated @app.on_event - using modern lifespan pattern
- structlog.configure() per request - one-time at startup
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from book_recommender.api.health import get_health_service
from book_recommender.api.health import router as health_router
from book_recommender.api.recommend import recommend_router
from book_recommender.core.config import get_settings
from book_recommender.core.logging import configure_logging, get_logger
from book_recommender.core.tracing import configure_tracing

settings = get_settings()

# Configure logging ONCE at module load
configure_logging(
    service_name=settings.service_name,
    log_level=settings.log_level,
    json_output=settings.log_json,
    environment=settings.environment,
)

logger = get_logger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager for startup/shutdown events."""
    # =========================================================================
    # STARTUP
    # =========================================================================
    logger.info(
        "startup",
        service=settings.service_name,
        version=settings.version,
        environment=settings.environment,
        malformed_policy=settings.malformed_policy.value,
    )

    if settings.tracing_enabled:
        configure_tracing(
            service_name=settings.service_name,
            service_version=settings.version,
            console_export=settings.tracing_console_export,
        )
        logger.info("tracing_configured")

    app.state.initialized = True
    app.state.environment = settings.environment
    get_health_service().set_initialized(True)

    yield

    # =========================================================================
    # SHUTDOWN
    # =========================================================================
    logger.info("shutdown", service=settings.service_name)

    app.state.initialized = False
    get_health_service().set_initialized(False)


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Book-Recommender",
    description="Content-based book recommendations over title, genre and synopsis features",
    version=settings.version,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "development" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(recommend_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint pointing to docs."""
    return {
        "service": settings.service_name,
        "version": settings.version,
        "docs": "/docs",
    }
