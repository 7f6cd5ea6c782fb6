"""
Movie Catalog REST API.

This module provides a FastAPI-based REST API for the movie catalog:
public listing and search endpoints, and admin endpoints (register,
login, dashboard, movie management) guarded by bearer tokens.
"""

from api.main import app, create_app

__all__ = ["app", "create_app"]
