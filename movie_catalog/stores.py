"""
Persistence for movies and admin accounts.

MovieStore and AdminStore wrap the shared async engine owned by
DatabaseManager. Callers pass SQLAlchemy predicates and sort keys; the
stores only execute them.
"""

import dataclasses
import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql import ColumnElement

from .database import DatabaseManager, admins, movie_genres, movies
from .models import AdminData, MovieData
from .utils import utcnow


class MovieStore:
    """Catalog store: movies plus their genre labels."""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self.logger = logging.getLogger("database.movies")

    async def count(self, where: Optional[ColumnElement] = None) -> int:
        """Count movies matching a predicate (all movies if None)."""
        query = select(func.count()).select_from(movies)
        if where is not None:
            query = query.where(where)

        async with self.db.engine.connect() as conn:
            return await conn.scalar(query)

    async def find(
        self,
        where: Optional[ColumnElement] = None,
        order_by: Sequence[ColumnElement] = (),
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[MovieData]:
        """Fetch movies matching a predicate, sorted and sliced."""
        query = select(movies)
        if where is not None:
            query = query.where(where)
        if order_by:
            query = query.order_by(*order_by)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        async with self.db.engine.connect() as conn:
            rows = (await conn.execute(query)).mappings().all()
            genres_map = await self._fetch_genres(conn, [row["id"] for row in rows])

        return [MovieData.from_row(row, genres_map.get(row["id"], [])) for row in rows]

    async def get(self, movie_id: int) -> Optional[MovieData]:
        """Get a single movie by id."""
        found = await self.find(movies.c.id == movie_id, limit=1)
        return found[0] if found else None

    async def insert(self, movie: MovieData) -> MovieData:
        """Insert a movie and its genres in one transaction."""
        async with self.db.engine.begin() as conn:
            result = await conn.execute(movies.insert().values(**movie.to_dict()))
            movie_id = result.inserted_primary_key[0]
            await self._insert_genres(conn, movie_id, movie.genres)

        self.logger.info(f"Inserted movie {movie_id}: {movie.title}")
        return dataclasses.replace(movie, id=movie_id, genres=_unique(movie.genres))

    async def update(self, movie_id: int, fields: dict) -> Optional[MovieData]:
        """
        Apply a partial update.

        Only the given columns are written. A `genres` entry replaces the
        whole label list. Returns the new state, or None if no such movie.
        """
        values = {k: v for k, v in fields.items() if k != "genres"}
        values.setdefault("updated_at", utcnow())

        async with self.db.engine.begin() as conn:
            result = await conn.execute(
                movies.update().where(movies.c.id == movie_id).values(**values)
            )
            if result.rowcount == 0:
                return None

            if "genres" in fields:
                await conn.execute(movie_genres.delete().where(movie_genres.c.movie_id == movie_id))
                await self._insert_genres(conn, movie_id, fields["genres"] or [])

        return await self.get(movie_id)

    async def delete(self, movie_id: int) -> bool:
        """Delete a movie and its genres. Returns False if it did not exist."""
        async with self.db.engine.begin() as conn:
            await conn.execute(movie_genres.delete().where(movie_genres.c.movie_id == movie_id))
            result = await conn.execute(movies.delete().where(movies.c.id == movie_id))

        return result.rowcount > 0

    async def _insert_genres(self, conn: AsyncConnection, movie_id: int, genres: List[str]) -> None:
        labels = _unique(genres)
        if not labels:
            return
        await conn.execute(
            movie_genres.insert(),
            [
                {"movie_id": movie_id, "genre_name": label, "position": position}
                for position, label in enumerate(labels)
            ],
        )

    async def _fetch_genres(self, conn: AsyncConnection, movie_ids: List[int]) -> Dict[int, List[str]]:
        """Batch fetch genre labels for a page of movies."""
        if not movie_ids:
            return {}

        result = await conn.execute(
            select(movie_genres.c.movie_id, movie_genres.c.genre_name)
            .where(movie_genres.c.movie_id.in_(movie_ids))
            .order_by(movie_genres.c.movie_id, movie_genres.c.position)
        )

        genres_map: Dict[int, List[str]] = {}
        for movie_id, genre_name in result:
            genres_map.setdefault(movie_id, []).append(genre_name)
        return genres_map


class AdminStore:
    """Credential store for admin accounts."""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self.logger = logging.getLogger("database.admins")

    async def find_by_id(self, admin_id: int) -> Optional[AdminData]:
        return await self._find_one(admins.c.id == admin_id)

    async def find_by_username(self, username: str) -> Optional[AdminData]:
        return await self._find_one(admins.c.username == username)

    async def find_by_username_or_email(self, username: str, email: str) -> Optional[AdminData]:
        """Single existence query matching either field."""
        return await self._find_one(or_(admins.c.username == username, admins.c.email == email))

    async def insert(self, admin: AdminData) -> AdminData:
        """
        Insert an admin account.

        Raises:
            IntegrityError: If the username or email is already taken.
        """
        async with self.db.engine.begin() as conn:
            result = await conn.execute(admins.insert().values(**admin.to_dict()))
            admin_id = result.inserted_primary_key[0]

        self.logger.info(f"Inserted admin {admin_id}: {admin.username}")
        return dataclasses.replace(admin, id=admin_id)

    async def update_last_login(self, admin_id: int, when: datetime) -> None:
        async with self.db.engine.begin() as conn:
            await conn.execute(admins.update().where(admins.c.id == admin_id).values(last_login=when))

    async def count(self) -> int:
        async with self.db.engine.connect() as conn:
            return await conn.scalar(select(func.count()).select_from(admins))

    async def _find_one(self, where: ColumnElement) -> Optional[AdminData]:
        async with self.db.engine.connect() as conn:
            row = (await conn.execute(select(admins).where(where).limit(1))).mappings().first()
        return AdminData.from_row(row) if row else None


def _unique(labels: List[str]) -> List[str]:
    """Drop duplicate labels (case-insensitively), keeping first occurrence order."""
    seen = set()
    unique = []
    for label in labels:
        if label.lower() not in seen:
            seen.add(label.lower())
            unique.append(label)
    return unique
