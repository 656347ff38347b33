"""
Main Application Entry Point

This module sets up the FastAPI application with:
- Logging configuration
- Token service initialization on startup
- Rate limiting
- Route registration

The domain collections (stories, vlyes, moments, revlyes) are served by an
external resource store; this application only authenticates callers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.dependencies import get_token_service
from app.limiter import limiter
from app.routes import auth


logging.basicConfig(
    level=logging.DEBUG if settings.ENVIRONMENT == "development" else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - runs on startup and shutdown.

    Startup tasks:
    - Build the token service so a missing or weak JWT_SECRET_KEY stops
      the process here instead of failing on the first request
    """
    token_service = get_token_service()
    logger.info(
        f"Token service ready (environment={settings.ENVIRONMENT}, "
        f"expiration={token_service.expiration_days} days)"
    )

    yield


# Create FastAPI application instance
app = FastAPI(title="Vhub API", lifespan=lifespan)

# slowapi looks the limiter up on app.state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Register route modules
# All routes in auth.router will be prefixed with /auth
app.include_router(auth.router)


@app.get("/health")
async def health():
    """Liveness probe; does not require authentication."""
    return {"status": "ok"}
