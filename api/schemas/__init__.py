"""Pydantic schemas for API request and response validation."""

from api.schemas.common import CamelModel, ErrorResponse, MessageResponse, error_responses
from api.schemas.movie import (
    MovieCreate,
    MovieListResponse,
    MovieResponse,
    MovieUpdate,
)
from api.schemas.admin import (
    AdminLogin,
    AdminPublic,
    AdminRegister,
    DashboardResponse,
    DashboardStats,
    LoginResponse,
    RegisterResponse,
)

__all__ = [
    # Common
    "CamelModel",
    "ErrorResponse",
    "MessageResponse",
    "error_responses",
    # Movie
    "MovieCreate",
    "MovieListResponse",
    "MovieResponse",
    "MovieUpdate",
    # Admin
    "AdminLogin",
    "AdminPublic",
    "AdminRegister",
    "DashboardResponse",
    "DashboardStats",
    "LoginResponse",
    "RegisterResponse",
]
