"""
LinkRisk API Application

Main FastAPI application entry point.
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from linkrisk import __version__
from linkrisk.api.dependencies import init_engine
from linkrisk.api.routes import get_api_router
from linkrisk.config.settings import get_settings
from linkrisk.utils.constants import APP_FULL_NAME

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {APP_FULL_NAME}...")

    engine = init_engine(settings)

    logger.info("=== Provider Configuration ===")
    for status in engine.get_provider_status().values():
        logger.info(f"  {status['name']}: {'✓ live' if status['configured'] else '✗ synthetic'}")
    logger.info(
        f"  Timeouts: provider={settings.provider_timeout_seconds}s, "
        f"deadline={settings.assessment_deadline_seconds}s, "
        f"max in flight={settings.max_concurrent_providers}"
    )

    logger.info("LinkRisk API started successfully")

    yield

    logger.info("LinkRisk API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="LinkRisk API",
    description="Security risk aggregation for URLs, IP addresses and email addresses",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


def get_cors_origins():
    """Get CORS origins from environment or use defaults."""
    custom_origins = os.getenv("CORS_ORIGINS", "")

    if custom_origins:
        origins = [origin.strip() for origin in custom_origins.split(",") if origin.strip()]
    else:
        # Default: localhost only (development)
        origins = [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]

    logger.info(f"CORS allowed origins: {origins}")
    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(get_api_router())


@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": "LinkRisk API",
        "description": "Security risk aggregation for URLs, IP addresses and email addresses",
        "version": __version__,
        "docs": "/docs",
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An error occurred",
        },
    )


def run():
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "linkrisk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
