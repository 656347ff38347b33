"""
Authentication Routes

Endpoints for callers that already hold a bearer token:

- GET /auth/me: who the token belongs to and when it expires
- POST /auth/refresh: issue a fresh token for the same identity

There is no login endpoint here. Tokens are issued to identities that were
verified elsewhere (see scripts/issue_token.py), and renewal is simply a
new token; the old one stays valid until its own expiration.
"""

import logging

from fastapi import APIRouter, Depends, Request

from app.config import settings
from app.dependencies import get_current_identity, get_token_service
from app.limiter import limiter
from app.services.auth import TokenService
from app.services.identity import Identity


logger = logging.getLogger(__name__)

# Create router with /auth prefix
router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def me(
    request: Request,
    identity: Identity = Depends(get_current_identity),
):
    """
    Describe the authenticated caller.

    Returns:
        Username and token expiration (ISO 8601, UTC)
    """
    # get_current_identity only admits tokens with an "exp" claim
    return {
        "username": identity.username,
        "expires_at": request.state.claims.expiration.isoformat(),
    }


@router.post("/refresh")
@limiter.limit(settings.TOKEN_REFRESH_RATE_LIMIT)
async def refresh(
    request: Request,
    identity: Identity = Depends(get_current_identity),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Issue a new token for the authenticated identity.

    Returns:
        The new token in OAuth 2.0 bearer response format
    """
    token = token_service.generate_token(identity)
    expires_at = token_service.extract_expiration(token)
    logger.info(f"Issued refreshed token for {identity.username}")
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_at": expires_at.isoformat(),
    }
