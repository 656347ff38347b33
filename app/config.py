"""
Application Configuration Module

This module handles all application settings using Pydantic's BaseSettings.
Environment variables are automatically loaded from a .env file, making it
easy to manage different configurations for development and production.

The token service never reads these settings directly. TokenConfig turns
them into an immutable (secret key, expiration days) pair that is handed
to the service constructor.
"""

import base64
import binascii
from dataclasses import dataclass

from pydantic_settings import BaseSettings
from pydantic import field_validator

from app.exceptions import ConfigurationError


# HS256 needs a key at least as long as its digest (256 bits)
MIN_SECRET_KEY_BYTES = 32


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic automatically reads these values from:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values (if specified)
    """

    # Base64-encoded HMAC key used to sign and verify JWT tokens
    # Generate one with: python scripts/issue_token.py --generate-secret
    JWT_SECRET_KEY: str = ""

    # Token lifetime, counted in DAYS (not milliseconds)
    JWT_EXPIRATION: int = 1

    # Environment mode: "development" or "production"
    # Affects logging verbosity
    ENVIRONMENT: str = "production"

    # Comma-separated list of usernames known to the bundled identity provider
    KNOWN_USERS: str = ""

    # Storage backend for rate limit counters (e.g. redis://localhost:6379)
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Limit applied to token renewal requests
    TOKEN_REFRESH_RATE_LIMIT: str = "10/minute"

    @field_validator("JWT_SECRET_KEY")
    def strip_secret_key(cls, value):
        return value.strip()

    @property
    def known_users(self) -> list[str]:
        return [u.strip() for u in self.KNOWN_USERS.split(",") if u.strip()]

    class Config:
        """
        Pydantic configuration class.

        Tells Pydantic to load settings from a .env file,
        which should be placed in the project root directory.
        """
        env_file = ".env"


@dataclass(frozen=True)
class TokenConfig:
    """
    Immutable signing configuration for TokenService.

    Attributes:
        secret_key: Raw HMAC-SHA256 key bytes
        expiration_days: Days added to the issue time to compute "exp"
    """
    secret_key: bytes
    expiration_days: int

    def __post_init__(self):
        if len(self.secret_key) < MIN_SECRET_KEY_BYTES:
            raise ConfigurationError(
                f"Secret key must be at least {MIN_SECRET_KEY_BYTES} bytes "
                f"({MIN_SECRET_KEY_BYTES * 8} bits), got {len(self.secret_key)}"
            )
        if self.expiration_days < 0:
            raise ConfigurationError("Expiration must be a non-negative number of days")

    @classmethod
    def from_base64(cls, secret_key: str, expiration_days: int) -> "TokenConfig":
        """
        Build a config from a base64-encoded secret.

        Raises:
            ConfigurationError: If the secret is empty, not valid base64,
                                or decodes to fewer than 32 bytes
        """
        if not secret_key:
            raise ConfigurationError("JWT_SECRET_KEY is not set")
        try:
            key_bytes = base64.b64decode(secret_key, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"JWT_SECRET_KEY is not valid base64: {e}") from e
        return cls(secret_key=key_bytes, expiration_days=expiration_days)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        return cls.from_base64(settings.JWT_SECRET_KEY, settings.JWT_EXPIRATION)


# Global settings instance used throughout the application
# Import this instance to access configuration values
settings = Settings()
