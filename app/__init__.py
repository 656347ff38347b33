"""
Vhub API Application Package

This package contains the authentication layer of the Vhub API: the
stateless JWT token service and the FastAPI application that uses it to
authenticate callers. The package is organized as follows:

- config.py: Application settings and the immutable token configuration
- dependencies.py: FastAPI dependency injection functions
- exceptions.py: Token service error hierarchy
- limiter.py: Rate limiting configuration
- main.py: FastAPI application entry point

Subpackages:
- routes/: API route handlers (auth)
- services/: Token issuance and validation, identity lookup
"""
