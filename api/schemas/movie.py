"""
Movie-related Pydantic schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from api.schemas.common import CamelModel


class MovieCreate(CamelModel):
    """Request body for adding a movie."""

    title: str = Field(..., min_length=1)
    year: int
    rating: float
    poster: str = Field(..., min_length=1, description="Poster image URL")
    watch_url: str = Field(..., min_length=1, description="Streaming page URL")
    download_url: str = Field(..., min_length=1, description="Download page URL")
    genres: List[str] = []
    featured: bool = False
    pinned: bool = False
    status: str = "active"


class MovieUpdate(CamelModel):
    """Partial update; only the fields sent are changed."""

    title: Optional[str] = Field(None, min_length=1)
    year: Optional[int] = None
    rating: Optional[float] = None
    poster: Optional[str] = None
    watch_url: Optional[str] = None
    download_url: Optional[str] = None
    genres: Optional[List[str]] = None
    featured: Optional[bool] = None
    pinned: Optional[bool] = None
    status: Optional[str] = None


class MovieResponse(CamelModel):
    """A stored movie."""

    id: int
    title: str
    year: int
    rating: float
    poster: str
    watch_url: str
    download_url: str
    genres: List[str] = []
    featured: bool = False
    pinned: bool = False
    status: str = "active"
    created_at: datetime
    updated_at: datetime


class MovieListResponse(CamelModel):
    """One page of movies with pagination totals."""

    movies: List[MovieResponse]
    current_page: int
    total_pages: int
    total_movies: int
