"""
Admin account and dashboard schemas.
"""

from typing import List

from pydantic import BaseModel, Field

from api.schemas.common import CamelModel
from api.schemas.movie import MovieResponse


class AdminRegister(BaseModel):
    """Request to create an admin account."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, max_length=255)


class AdminLogin(BaseModel):
    """Login credentials."""

    username: str
    password: str


class AdminPublic(CamelModel):
    """Account fields that are safe to return."""

    id: int
    username: str
    email: str
    role: str


class RegisterResponse(BaseModel):
    message: str
    admin: AdminPublic


class LoginResponse(BaseModel):
    token: str
    admin: AdminPublic


class DashboardStats(CamelModel):
    total_movies: int
    active_movies: int
    featured_movies: int
    pinned_movies: int


class DashboardResponse(CamelModel):
    """Aggregate counts plus the most recently added movies."""

    stats: DashboardStats
    recent_movies: List[MovieResponse]
