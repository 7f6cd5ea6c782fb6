"""
Dependency injection for the API.

Configuration is cached per process. Stores and services are built once
at startup (see api.main) and handed out from app.state.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, Request

from api.schemas.movie import MovieListResponse, MovieResponse
from api.services.auth import AuthService
from api.services.catalog import CatalogService, MoviePage
from movie_catalog.config import Config
from movie_catalog.models import AdminData


@lru_cache()
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()


def get_auth_service(request: Request) -> AuthService:
    """AuthService built at startup."""
    return request.app.state.auth_service


def get_catalog_service(request: Request) -> CatalogService:
    """CatalogService built at startup."""
    return request.app.state.catalog_service


async def require_admin(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer <token>"),
    auth: AuthService = Depends(get_auth_service),
) -> AdminData:
    """
    Authorization gate for admin-only routes.

    Raises AuthenticationError (401) before the route body runs. On success
    the admin is also available as request.state.admin.
    """
    admin = await auth.authenticate(authorization)
    request.state.admin = admin
    return admin


def paginate(page: MoviePage) -> MovieListResponse:
    """
    Shape a catalog page into the listing envelope.

    Args:
        page: Items and totals from CatalogService

    Returns:
        {movies, currentPage, totalPages, totalMovies}
    """
    return MovieListResponse(
        movies=[MovieResponse.model_validate(movie) for movie in page.items],
        current_page=page.current_page,
        total_pages=page.total_pages,
        total_movies=page.total_items,
    )
