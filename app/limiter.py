"""
Rate Limiting Configuration

Token renewal is the only endpoint that mints credentials, so it is the one
route throttled here. Routes opt in with @limiter.limit(...).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from app.config import settings

# Counters are per client address; "memory://" only works with a single
# worker, point RATE_LIMIT_STORAGE_URI at redis:// when running several
limiter = Limiter(
    key_func=get_remote_address,
    key_prefix="vhub-auth",
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="moving-window",
)
