"""
Authentication Dependencies for FastAPI Routes

This module provides dependency injection functions for authentication.
These can be used in route handlers to require an authenticated caller.

It plays the role of the authentication filter in front of the token
service: the service raises on forged or garbled tokens, and this module
turns every failure into an HTTP 401 response.
"""

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status

from app.config import TokenConfig, settings
from app.exceptions import MalformedTokenError, SignatureVerificationError
from app.services.auth import TokenService
from app.services.identity import Identity, IdentityProvider, StaticIdentityProvider


logger = logging.getLogger(__name__)


@lru_cache
def get_token_service() -> TokenService:
    """
    Process-wide TokenService built from the application settings.

    The service is stateless, so one instance is shared by all requests.

    Raises:
        ConfigurationError: If JWT_SECRET_KEY or JWT_EXPIRATION is unusable
    """
    return TokenService(TokenConfig.from_settings(settings))


@lru_cache
def get_identity_provider() -> IdentityProvider:
    return StaticIdentityProvider(settings.known_users)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_bearer_token(request: Request) -> str:
    """
    Extract the JWT from an ``Authorization: Bearer <token>`` header.

    Raises:
        HTTPException: 401 if the header is missing or uses another scheme
    """
    header = request.headers.get("Authorization")
    if not header:
        raise _unauthorized("Not authenticated")

    scheme, _, param = header.partition(" ")
    if scheme.lower() != "bearer" or not param.strip():
        raise _unauthorized("Invalid token scheme")

    return param.strip()


async def get_current_identity(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> Identity:
    """
    Dependency that requires an authenticated identity.

    This function:
    1. Extracts the bearer token from the Authorization header
    2. Verifies the signature once and reads the subject
    3. Loads the identity for that subject
    4. Checks that the token belongs to it and has not expired

    Usage in routes:
        @router.get("/protected")
        async def protected_route(identity: Identity = Depends(get_current_identity)):
            return {"username": identity.username}

    Raises:
        HTTPException: 401 if authentication fails at any step
    """
    token = get_bearer_token(request)

    try:
        claims = token_service.extract_claim(token, lambda c: c)
        username = claims.subject
        if not username:
            raise _unauthorized("Invalid token payload")

        identity = identity_provider.load(username)
        if identity is None:
            raise _unauthorized("User not found")

        if not token_service.check_claims(claims, identity):
            raise _unauthorized("Token expired")

    except SignatureVerificationError as e:
        # Could be a forged token or a key rotation; worth a warning
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected token with bad signature from {client}: {e}")
        raise _unauthorized("Invalid token")
    except MalformedTokenError as e:
        logger.info(f"Rejected malformed token: {e}")
        raise _unauthorized("Invalid token")

    # Handlers read the verified claims from here instead of decoding again
    request.state.claims = claims
    return identity
