"""
API Routes Package

This package contains FastAPI route handlers for the application:

- auth.py: Token routes (current identity, token renewal)

Routes are registered in main.py using FastAPI's router system.
"""
