"""
Token Issuing Script

Issues a bearer token for a username using the configured JWT_SECRET_KEY
and JWT_EXPIRATION, or generates a new secret key.

Usage:
    python scripts/issue_token.py +15551234567
    python scripts/issue_token.py alice --claim role=admin --claim level=3
    python scripts/issue_token.py --generate-secret

Note: The username is trusted as-is. Only run this for identities that
have already been verified.
"""

import argparse
import base64
import json
import os
import secrets
import sys

# Add parent directory to Python path so we can import app modules
# This allows running the script from any directory
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import MIN_SECRET_KEY_BYTES, TokenConfig, settings
from app.exceptions import ConfigurationError
from app.services.auth import TokenService
from app.services.identity import Identity


def parse_claim(raw: str) -> tuple[str, object]:
    """
    Parse a ``key=value`` claim argument.

    Values are read as JSON when possible (numbers, booleans, null),
    otherwise kept as strings.
    """
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Expected key=value, got {raw!r}")
    try:
        return key, json.loads(value)
    except ValueError:
        return key, value


def generate_secret() -> str:
    return base64.b64encode(secrets.token_bytes(MIN_SECRET_KEY_BYTES)).decode("ascii")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Issue a Vhub API bearer token")
    parser.add_argument("username", nargs="?", help="Subject of the token")
    parser.add_argument("--claim", action="append", type=parse_claim, default=[],
                        help="Extra claim as key=value (repeatable)")
    parser.add_argument("--generate-secret", action="store_true",
                        help="Print a new base64 secret key and exit")
    args = parser.parse_args(argv)

    if args.generate_secret:
        print(generate_secret())
        return 0

    if not args.username:
        parser.error("username is required")

    try:
        service = TokenService(TokenConfig.from_settings(settings))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    print(service.generate_token(Identity(username=args.username), dict(args.claim)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
