"""
Movie endpoints.

Listings are public; create, update and delete require an admin token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_catalog_service, paginate, require_admin
from api.exceptions import InternalError
from api.logging_config import get_logger
from api.schemas.common import MessageResponse, error_responses
from api.schemas.movie import MovieCreate, MovieListResponse, MovieResponse, MovieUpdate
from api.services.catalog import CatalogService
from movie_catalog.models import AdminData

router = APIRouter()
logger = get_logger("movies")


@router.get("/movies", response_model=MovieListResponse, responses=error_responses(500))
async def list_movies(
    page: Optional[str] = Query(None, description="Page number (default 1)"),
    limit: Optional[str] = Query(None, description="Items per page (default 24)"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Browse the catalog, pinned movies first, then newest first.
    """
    try:
        result = await catalog.list_movies(page, limit)
    except SQLAlchemyError as e:
        logger.error(f"List movies failed: {e}")
        raise InternalError("Failed to fetch movies")

    return paginate(result)


@router.get("/movies/search", response_model=MovieListResponse, responses=error_responses(500))
async def search_movies(
    query: Optional[str] = Query(None, description="Substring of the title or a genre"),
    page: Optional[str] = Query(None, description="Page number (default 1)"),
    limit: Optional[str] = Query(None, description="Items per page (default 24)"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Case-insensitive search over titles and genre labels.

    An empty query returns the whole catalog.
    """
    try:
        result = await catalog.search(query, page, limit)
    except SQLAlchemyError as e:
        logger.error(f"Search failed: query={query!r} error={e}")
        raise InternalError("Search failed")

    return paginate(result)


@router.get("/movies/genre/{genres}", response_model=MovieListResponse, responses=error_responses(500))
async def movies_by_genre(
    genres: str,
    page: Optional[str] = Query(None, description="Page number (default 1)"),
    limit: Optional[str] = Query(None, description="Items per page (default 24)"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Movies carrying any of the comma-separated genres.
    """
    try:
        result = await catalog.by_genre(genres, page, limit)
    except SQLAlchemyError as e:
        logger.error(f"Genre listing failed: genres={genres!r} error={e}")
        raise InternalError("Failed to fetch movies by genre")

    return paginate(result)


@router.post(
    "/movies",
    response_model=MovieResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 500),
)
async def create_movie(
    request: MovieCreate,
    admin: AdminData = Depends(require_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Add a movie to the catalog.
    """
    try:
        movie = await catalog.create(request.model_dump())
    except SQLAlchemyError as e:
        logger.error(f"Create movie failed: admin_id={admin.id} error={e}")
        raise InternalError("Failed to add movie")

    return MovieResponse.model_validate(movie)


@router.put("/movies/{movie_id}", response_model=MovieResponse, responses=error_responses(400, 401, 404, 500))
async def update_movie(
    movie_id: int,
    request: MovieUpdate,
    admin: AdminData = Depends(require_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Change only the fields sent in the body.
    """
    try:
        movie = await catalog.update(movie_id, request.model_dump(exclude_unset=True))
    except SQLAlchemyError as e:
        logger.error(f"Update movie failed: movie_id={movie_id} admin_id={admin.id} error={e}")
        raise InternalError("Failed to update movie")

    return MovieResponse.model_validate(movie)


@router.delete("/movies/{movie_id}", response_model=MessageResponse, responses=error_responses(400, 401, 404, 500))
async def delete_movie(
    movie_id: int,
    admin: AdminData = Depends(require_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Remove a movie.
    """
    try:
        await catalog.delete(movie_id)
    except SQLAlchemyError as e:
        logger.error(f"Delete movie failed: movie_id={movie_id} admin_id={admin.id} error={e}")
        raise InternalError("Failed to delete movie")

    return MessageResponse(message="Movie deleted successfully")
