"""Chat API — FastAPI Application Factory."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_backend.common.exceptions import register_exception_handlers
from chat_backend.common.middleware import AccessLogMiddleware, SecurityHeadersMiddleware
from chat_backend.common.rate_limit import AdmissionLimiter
from chat_backend.config import Settings, settings
from chat_backend.database import engine
from chat_backend.messages.router import router as messages_router
from chat_backend.sessions.router import router as sessions_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def _sweep_buckets(limiter: AdmissionLimiter, interval_seconds: int) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        limiter.sweep()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    # Startup
    app_settings: Settings = app.state.settings
    sweeper: Optional[asyncio.Task] = None
    if app_settings.RATE_LIMIT_SWEEP_SECONDS > 0:
        sweeper = asyncio.create_task(
            _sweep_buckets(app.state.limiter, app_settings.RATE_LIMIT_SWEEP_SECONDS)
        )
    if not app_settings.API_KEY:
        logger.warning("API_KEY is not set — API-key authentication is disabled")
    yield
    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
    await engine.dispose()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL)

    app = FastAPI(
        title="Chat API",
        description="Chat sessions and messages behind an API key and per-client rate limit",
        version="1.0.0",
        docs_url="/docs" if app_settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if app_settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting: one limiter per app instance
    app.state.limiter = AdmissionLimiter(
        limit=app_settings.RATE_LIMIT,
        window_ms=app_settings.RATE_LIMIT_WINDOW_MS,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Hardening headers, then access log outermost so it sees every response
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(AccessLogMiddleware)

    # Health check (no auth, no rate limit)
    @app.get("/health", tags=["system"])
    async def health_check():
        return {"status": "ok"}

    # Register routers
    app.include_router(sessions_router, prefix="/sessions", tags=["sessions"])
    app.include_router(messages_router, prefix="/messages", tags=["messages"])

    return app


app = create_app()
