"""
Lead Qualifier - FastAPI Application Entry Point.

Qualifies leads after an AI voice call:
- Cold-signal short-circuits from call metadata
- BANT extraction from the transcript with Claude
- Heuristic fallback when the LLM is unavailable

Run with:
    uvicorn lead_qualifier.main:app --reload --port 8000
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lead_qualifier.core.config import get_settings, get_runtime_config
from lead_qualifier.api.webhooks import router as webhook_router, test_router
from lead_qualifier.api.settings import router as settings_router


# ===========================================
# Logging Configuration
# ===========================================

def setup_logging():
    """Configure application logging."""
    settings = get_settings()
    level = logging.DEBUG if settings.DEBUG else getattr(
        logging, settings.LOG_LEVEL.upper(), logging.INFO
    )

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("LiteLLM").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = setup_logging()


# ===========================================
# Application Lifespan
# ===========================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    runtime_config = get_runtime_config()

    logger.info("=" * 50)
    logger.info("Lead Qualifier Starting Up")
    logger.info("=" * 50)
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Model: {runtime_config.llm_model}")

    # Verify critical settings
    if not runtime_config.is_llm_configured():
        logger.warning("Anthropic API key not configured - heuristic fallback only")

    if not runtime_config.vapi_api_key:
        logger.warning("Vapi API key not configured - call re-sync disabled")

    logger.info("Startup complete - ready to accept webhooks")

    yield

    # Shutdown
    logger.info("Lead Qualifier shutting down...")


# ===========================================
# FastAPI Application
# ===========================================

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Lead Qualifier",
        description="""
        Post-call lead qualification for AI voice calls.

        ## Qualification tiers

        - **Cold signals**: short, silent, voicemail or failed calls
        - **LLM extraction**: BANT data, intent and score from the transcript
        - **Heuristic fallback**: keyword and duration scoring

        ## Webhooks

        - `POST /webhook/vapi` - Vapi call events
        - `POST /webhook/sync/{call_id}` - Re-qualify a call from Vapi

        ## Settings

        - `GET /settings/status`, `POST /settings/config`, `DELETE /settings/config`
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(webhook_router)
    app.include_router(test_router)
    app.include_router(settings_router)

    return app


# Create app instance
app = create_app()


# ===========================================
# Root Endpoint
# ===========================================

@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return JSONResponse({
        "service": "Lead Qualifier",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "webhooks": {
                "vapi": "POST /webhook/vapi",
                "sync": "POST /webhook/sync/{call_id}"
            },
            "settings": {
                "status": "GET /settings/status",
                "config": "POST /settings/config"
            },
            "testing": {
                "qualify": "POST /test/qualify",
                "insights": "POST /test/insights",
                "health": "GET /test/health"
            },
            "docs": "GET /docs"
        }
    })


# ===========================================
# Error Handlers
# ===========================================

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if get_settings().DEBUG else "An error occurred"
        }
    )


# ===========================================
# Main Entry Point
# ===========================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "lead_qualifier.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
