"""
Catalog service: query construction and movie lifecycle.

Every listing (plain, search, genre) shares one pagination contract:
pinned movies first, then newest first, with an independent count query
over the same predicate.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic.alias_generators import to_camel
from sqlalchemy import false, func, or_, select, true
from sqlalchemy.sql import ColumnElement

from api.exceptions import NotFoundError, ValidationError
from api.logging_config import get_logger
from movie_catalog.config import Config
from movie_catalog.database import movie_genres, movies
from movie_catalog.models import (
    MOVIE_FIELDS,
    REQUIRED_MOVIE_FIELDS,
    MovieData,
    is_blank,
    missing_movie_fields,
    parse_genres,
)
from movie_catalog.stores import MovieStore
from movie_catalog.utils import LIKE_ESCAPE, escape_like, utcnow

logger = get_logger("catalog")

# id breaks ties between movies created in the same instant
LISTING_ORDER = (movies.c.pinned.desc(), movies.c.created_at.desc(), movies.c.id.desc())
RECENT_ORDER = (movies.c.created_at.desc(), movies.c.id.desc())

DASHBOARD_RECENT_LIMIT = 5


@dataclass
class MoviePage:
    """One page of a listing plus totals."""

    items: List[MovieData]
    current_page: int
    total_pages: int
    total_items: int


def _positive_int(value: Any) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


class CatalogService:
    """Listings, search and admin mutations over the movie store."""

    def __init__(self, store: MovieStore, config: Config):
        self.store = store
        self.config = config

    # ============ QUERY BUILDING ============

    def normalize_pagination(self, page: Any = None, limit: Any = None) -> Tuple[int, int]:
        """Absent or invalid values fall back to page 1 / the default page size."""
        page = _positive_int(page) or 1
        limit = _positive_int(limit) or self.config.default_page_size
        return page, min(limit, self.config.max_page_size)

    @staticmethod
    def search_predicate(query: Optional[str]) -> Optional[ColumnElement]:
        """Title or any genre label contains the query, case-insensitively."""
        if not query:
            return None

        pattern = f"%{escape_like(query.lower())}%"
        genre_match = select(movie_genres.c.movie_id).where(
            func.lower(movie_genres.c.genre_name).like(pattern, escape=LIKE_ESCAPE)
        )
        return or_(
            func.lower(movies.c.title).like(pattern, escape=LIKE_ESCAPE),
            movies.c.id.in_(genre_match),
        )

    @staticmethod
    def genre_predicate(genres: Union[str, Iterable[str], None]) -> ColumnElement:
        """Movies carrying any of the requested genre labels."""
        labels = parse_genres(genres)
        if not labels:
            return false()
        return movies.c.id.in_(
            select(movie_genres.c.movie_id).where(movie_genres.c.genre_name.in_(labels))
        )

    async def _paginate(self, where: Optional[ColumnElement], page: Any, limit: Any) -> MoviePage:
        page, limit = self.normalize_pagination(page, limit)

        # Count and page are separate reads; concurrent writes may skew them
        total = await self.store.count(where)
        offset = (page - 1) * limit

        # Pages past the end are empty without asking the database, whose
        # OFFSET is a 64-bit integer
        items: List[MovieData] = []
        if offset < total:
            items = await self.store.find(where, order_by=LISTING_ORDER, offset=offset, limit=limit)

        return MoviePage(
            items=items,
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_items=total,
        )

    # ============ LISTINGS ============

    async def list_movies(self, page: Any = None, limit: Any = None) -> MoviePage:
        return await self._paginate(None, page, limit)

    async def search(self, query: Optional[str], page: Any = None, limit: Any = None) -> MoviePage:
        return await self._paginate(self.search_predicate(query), page, limit)

    async def by_genre(
        self,
        genres: Union[str, Iterable[str], None],
        page: Any = None,
        limit: Any = None,
    ) -> MoviePage:
        return await self._paginate(self.genre_predicate(genres), page, limit)

    # ============ MUTATIONS ============

    async def create(self, payload: Mapping[str, Any]) -> MovieData:
        """
        Store a new movie.

        Raises:
            ValidationError: If a required field is missing or blank.
        """
        missing = [to_camel(f) for f in missing_movie_fields(payload)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        movie = MovieData.from_payload({**payload, "genres": parse_genres(payload.get("genres"))})
        movie.created_at = movie.updated_at = utcnow()

        stored = await self.store.insert(movie)
        logger.info(f"Movie created: movie_id={stored.id} title={stored.title}")
        return stored

    async def update(self, movie_id: int, changes: Mapping[str, Any]) -> MovieData:
        """
        Merge the supplied fields into an existing movie.

        Raises:
            ValidationError: If a field is set to null (or a required one to blank).
            NotFoundError: If the movie does not exist.
        """
        fields = {k: v for k, v in changes.items() if k in MOVIE_FIELDS}

        cleared = [
            to_camel(k) for k, v in fields.items()
            if k != "genres" and (v is None or (k in REQUIRED_MOVIE_FIELDS and is_blank(v)))
        ]
        if cleared:
            raise ValidationError(f"Fields cannot be empty: {', '.join(cleared)}")

        if "genres" in fields:
            fields["genres"] = parse_genres(fields["genres"])
        fields["updated_at"] = utcnow()

        updated = await self.store.update(movie_id, fields)
        if updated is None:
            logger.warning(f"Update failed: movie_id={movie_id} not found")
            raise NotFoundError("Movie", movie_id)

        logger.info(f"Movie updated: movie_id={movie_id} fields={sorted(changes)}")
        return updated

    async def delete(self, movie_id: int) -> None:
        """
        Remove a movie.

        Raises:
            NotFoundError: If the movie does not exist.
        """
        if not await self.store.delete(movie_id):
            logger.warning(f"Delete failed: movie_id={movie_id} not found")
            raise NotFoundError("Movie", movie_id)

        logger.info(f"Movie deleted: movie_id={movie_id}")

    # ============ DASHBOARD ============

    async def dashboard(self) -> dict:
        """Four independent counts plus the most recently created movies."""
        stats = {
            "total_movies": await self.store.count(),
            "active_movies": await self.store.count(movies.c.status == "active"),
            "featured_movies": await self.store.count(movies.c.featured == true()),
            "pinned_movies": await self.store.count(movies.c.pinned == true()),
        }
        recent = await self.store.find(order_by=RECENT_ORDER, limit=DASHBOARD_RECENT_LIMIT)
        return {"stats": stats, "recent_movies": recent}
