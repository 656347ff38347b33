"""
JWT Token Authentication Service

This module handles creation and verification of JSON Web Tokens (JWTs)
for stateless authentication. JWTs are self-contained tokens that encode
user information and are cryptographically signed to prevent tampering.

Key concepts:
- Tokens are signed with HMAC-SHA256 using the configured secret key
- Tokens expire a configured number of DAYS after they are issued
- No database lookup needed to verify tokens (stateless)
- Nothing is stored server-side, so expiration is the only way a token
  stops being valid

Error policy:
- A token that cannot be parsed raises MalformedTokenError
- A token whose signature does not verify raises SignatureVerificationError
- An expired token, or one issued to somebody else, is simply not valid
  (is_token_valid returns False)
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional, Protocol, TypeVar

from jose import jwk, jwt
from jose.constants import ALGORITHMS
from jose.exceptions import JWKError, JWTClaimsError, JWTError
from jose.utils import base64url_decode, base64url_encode

from app.config import TokenConfig
from app.exceptions import ConfigurationError, MalformedTokenError, SignatureVerificationError


# HMAC-SHA256 algorithm for signing JWT tokens
# This is a symmetric signing method (same key for sign/verify)
ALGORITHM = ALGORITHMS.HS256

# Claim names written by generate_token(); extra claims using these
# names are overwritten
RESERVED_CLAIMS = ("sub", "iat", "exp")

# Time checks are done here against the service clock, not by python-jose.
# jti, aud and at_hash are ordinary extra claims for this service.
_DECODE_OPTIONS = {
    "verify_exp": False,
    "verify_nbf": False,
    "verify_aud": False,
    "verify_jti": False,
    "verify_at_hash": False,
}

T = TypeVar("T")


class HasUsername(Protocol):
    username: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_datetime(value: Any, name: str) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedTokenError(f"Claim '{name}' must be a NumericDate")
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, ValueError, OSError) as e:
        raise MalformedTokenError(f"Claim '{name}' is out of range: {e}") from e


class Claims(dict):
    """
    Decoded claim set of a verified token.

    Behaves like the plain dict returned by the JWT library, with typed
    accessors for the registered claims this service writes.
    """

    @property
    def subject(self) -> Optional[str]:
        return self.get("sub")

    @property
    def issued_at(self) -> Optional[datetime]:
        return _to_datetime(self.get("iat"), "iat")

    @property
    def expiration(self) -> Optional[datetime]:
        return _to_datetime(self.get("exp"), "exp")


ClaimSelector = Callable[[Claims], T]


class TokenService:
    """
    Issues and validates signed bearer tokens.

    The service holds no mutable state: the signing key and expiration
    policy come from an immutable TokenConfig, so a single instance can be
    shared by every request handler without locking.

    Args:
        config: Secret key bytes and expiration policy in days
        clock: Returns the current time as an aware UTC datetime
               (injectable for tests)

    Raises:
        ConfigurationError: If the key cannot be used for HS256

    Example:
        service = TokenService(TokenConfig.from_settings(settings))
        token = service.generate_token(identity)
        service.is_token_valid(token, identity)  # True
    """

    def __init__(self, config: TokenConfig, clock: Callable[[], datetime] = _utcnow):
        self._config = config
        self._clock = clock
        try:
            self._signing_key = jwk.construct(config.secret_key, ALGORITHM)
        except JWKError as e:
            raise ConfigurationError(f"Secret key rejected for {ALGORITHM}: {e}") from e

    @property
    def expiration_days(self) -> int:
        return self._config.expiration_days

    def generate_token(
        self,
        identity: HasUsername,
        extra_claims: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Create a signed JWT for the given identity.

        The payload is the extra claims plus "sub" (the username), "iat"
        (now) and "exp" (now plus the configured number of days). When an
        extra claim uses one of those reserved names the reserved value wins.

        Args:
            identity: Any object exposing a non-empty ``username``
            extra_claims: Optional scalar claims merged into the payload

        Returns:
            Compact serialized token: header.payload.signature

        Raises:
            ValueError: If the identity has no username
        """
        username = getattr(identity, "username", None)
        if not isinstance(username, str) or not username:
            raise ValueError("Identity must have a non-empty username")

        issued_at = self._clock()
        expiration = issued_at + timedelta(days=self._config.expiration_days)

        # Copy so the caller's mapping is never mutated
        to_encode = dict(extra_claims or {})
        to_encode.update({
            "sub": username,
            "iat": issued_at,
            "exp": expiration,
        })

        # python-jose converts the datetime claims to Unix timestamps
        return jwt.encode(to_encode, self._signing_key, algorithm=ALGORITHM)

    def extract_claim(self, token: str, selector: ClaimSelector) -> T:
        """
        Verify a token and apply ``selector`` to its claim set.

        Raises:
            MalformedTokenError: If the token cannot be parsed
            SignatureVerificationError: If the signature does not verify
        """
        return selector(self._extract_all_claims(token))

    def extract_username(self, token: str) -> Optional[str]:
        return self.extract_claim(token, lambda claims: claims.subject)

    def extract_expiration(self, token: str) -> Optional[datetime]:
        return self.extract_claim(token, lambda claims: claims.expiration)

    def is_token_valid(self, token: str, identity: HasUsername) -> bool:
        """
        Check that a token belongs to ``identity`` and has not expired.

        Verification failures are raised, not folded into False, so callers
        can tell a forged token apart from an expired one.

        Returns:
            True if the subject matches and expiration is still in the future
        """
        return self.check_claims(self._extract_all_claims(token), identity)

    def check_claims(self, claims: Claims, identity: HasUsername) -> bool:
        """Same decision as is_token_valid, for an already verified claim set."""
        if claims.subject != identity.username:
            return False
        return not self._is_expired(claims)

    def _is_expired(self, claims: Claims) -> bool:
        expiration = claims.expiration
        # Tokens without "exp" are never issued here; treat them as expired
        if expiration is None:
            return True
        return expiration <= self._clock()

    def _extract_all_claims(self, token: str) -> Claims:
        if not isinstance(token, str) or token.count(".") != 2:
            raise MalformedTokenError("Token must have three dot-separated segments")

        # Parse without verification first so a garbled token is reported
        # as malformed rather than as a bad signature
        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise MalformedTokenError(str(e)) from e

        # The last character of an HS256 signature carries unused bits that a
        # lenient base64 decoder ignores; only the canonical encoding is accepted
        signature = token.rsplit(".", 1)[1].encode("utf-8")
        if base64url_encode(base64url_decode(signature)) != signature:
            raise SignatureVerificationError("Signature segment is not canonical base64url")

        try:
            payload = jwt.decode(
                token,
                self._signing_key,
                algorithms=[ALGORITHM],
                options=_DECODE_OPTIONS,
            )
        except JWTClaimsError as e:
            raise MalformedTokenError(str(e)) from e
        except JWTError as e:
            raise SignatureVerificationError(str(e)) from e

        return Claims(payload)
