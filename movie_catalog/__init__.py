"""
Movie Catalog - movie records and admin accounts behind a REST API.

This package provides:
- Configuration loading
- Table definitions and the async database manager
- Movie and admin stores
- Password hashing and bearer token primitives
- The operator command line (setup, status, create-admin, seed, serve)
"""

from .config import Config
from .models import AdminData, MovieData
from .database import DatabaseManager
from .stores import AdminStore, MovieStore

__version__ = "1.0.0"
__all__ = [
    "Config",
    "AdminData",
    "MovieData",
    "DatabaseManager",
    "AdminStore",
    "MovieStore",
]
