"""
Channel Site Builder API.

Wires settings, logging, middleware, error handlers and routers into
the FastAPI app. Run with:

    uvicorn channelsite.api.main:app --reload
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from channelsite import __version__
from channelsite.core.config import get_settings
from channelsite.core.logging_config import setup_logging, get_logger
from channelsite.core.exceptions import ChannelSiteException, RateLimitExceeded
from channelsite.core.audit import AuditMiddleware, SecurityHeadersMiddleware
from channelsite.api.routes import (
    chat_router,
    deploy_router,
    generation_router,
    health_router,
    projects_router,
    providers_router,
    sync_router,
    youtube_router,
)


# Logging first, so module loggers created by the imports below have handlers
settings = get_settings()
setup_logging(settings.log_level, settings.log_dir)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: log the effective configuration, create missing tables.
    Shutdown: dispose of the connection pool.
    """
    from channelsite.database.connection import get_database
    from channelsite.database.init_db import init_tables

    logger.info(f"Starting {settings.app_name} {__version__} ({settings.app_env})")
    logger.info(
        f"Providers: {' -> '.join(settings.llm_provider_order)} | "
        f"rate limit {settings.rate_limit_per_minute}/min | "
        f"persistent memory {settings.memory_persistent}"
    )

    # Existing Supabase tables are left alone
    try:
        init_tables()
    except SQLAlchemyError as e:
        logger.error(f"Could not create tables, continuing without: {e}")

    yield

    logger.info(f"Stopping {settings.app_name}")
    get_database().close()


app = FastAPI(
    title="Channel Site Builder API",
    description="""
    Builds and edits websites for YouTube channels through chat.

    ## Features

    - **Projects**: Per-user website projects with plan limits
    - **Generation**: Full-page generation with a Groq -> OpenRouter -> Together fallback chain
    - **Targeted Edits**: Change one component and leave the rest of the page untouched
    - **Assistant Chat**: Context-aware website advice per project
    - **YouTube**: Channel and latest-video lookup
    - **GitHub Sync**: Push the site and a generated README to a repository
    - **Netlify Deploy**: Publish the site on Netlify
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware (last added runs first)
# ============================================================

app.add_middleware(SecurityHeadersMiddleware)

if settings.enable_audit_logging:
    app.add_middleware(AuditMiddleware)

if settings.is_development():
    # The Streamlit UI runs on a different port in development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ============================================================
# Error Handlers
# ============================================================

@app.exception_handler(ChannelSiteException)
async def channelsite_exception_handler(request: Request, exc: ChannelSiteException):
    """Every application error becomes an ErrorResponse with its own status."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")

    headers = None
    if isinstance(exc, RateLimitExceeded):
        headers = {"Retry-After": str(exc.retry_after)}

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort; the exception text is only shown in development."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": str(exc) if settings.is_development() else None,
            "timestamp": datetime.utcnow().isoformat(),
        }
    )


# ============================================================
# Routers
# ============================================================

for router in (
    health_router,
    providers_router,
    projects_router,
    chat_router,
    generation_router,
    youtube_router,
    sync_router,
    deploy_router,
):
    app.include_router(router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "Channel Site Builder API",
        "version": __version__,
        "documentation": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "channelsite.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development(),
    )
