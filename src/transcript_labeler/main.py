"""
FastAPI application entry point for the Transcript Labeler.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from transcript_labeler.api.dependencies import get_llm_client
from transcript_labeler.api.error_handlers import EXCEPTION_HANDLERS
from transcript_labeler.api.middleware import RequestTracingMiddleware
from transcript_labeler.api.routes import router
from transcript_labeler.config import settings
from transcript_labeler.logging_config import configure_logging

# Configure structured logging before anything logs
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log effective configuration on startup, close the LLM client on shutdown."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        model=settings.ANTHROPIC_MODEL,
        max_batch_chars=settings.MAX_BATCH_CHARS,
        rate_limit_interval_seconds=settings.RATE_LIMIT_INTERVAL_SECONDS,
        debug_mode=settings.DEBUG_MODE,
        debug_api=settings.DEBUG_API,
        api_key_configured=bool(settings.ANTHROPIC_API_KEY),
    )
    if not settings.ANTHROPIC_API_KEY and (not settings.DEBUG_MODE or settings.DEBUG_API):
        logger.error("ANTHROPIC_API_KEY is not set; categorize requests will fail")

    yield

    logger.info("Application shutdown")
    if get_llm_client.cache_info().currsize:
        client = get_llm_client()
        if client is not None:
            await client.close()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    description="Labels design-conversation transcript snippets as problem- or solution-oriented",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Request tracing middleware (outermost, so request_id is in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router, tags=["categorize"])

if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "categorize": "/api/categorize",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "transcript_labeler.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Only for development
    )
