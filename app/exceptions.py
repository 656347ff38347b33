"""
Token Service Exceptions

Errors raised by the token service and its configuration layer.

Two families exist:
- ConfigurationError: the service cannot be built (fatal at startup)
- TokenError subclasses: a caller-supplied token could not be decoded
  or verified

An expired token is not an error. It is an expected outcome and
is_token_valid() reports it as False.
"""


class TokenServiceError(Exception):
    """Base class for every error raised by the token service."""


class ConfigurationError(TokenServiceError):
    """The secret key or expiration policy is missing or unusable."""


class TokenError(TokenServiceError):
    """A token could not be decoded or verified."""


class MalformedTokenError(TokenError):
    """The token is not a well-formed compact JWS with a JSON claim set."""


class SignatureVerificationError(TokenError):
    """The token signature does not match under the configured key."""
