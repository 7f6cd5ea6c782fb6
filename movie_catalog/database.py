"""
Database manager for the movie catalog.

Handles:
- Table definitions (movies, movie_genres, admins)
- Async engine creation with SQLAlchemy
- Table setup and status reporting
"""

from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    event,
    func,
    inspect,
    select,
)
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .config import Config
from .utils import setup_logger, utcnow

metadata = MetaData()

movies = Table(
    "movies",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("year", Integer, nullable=False),
    Column("rating", Float, nullable=False),
    Column("poster", String(1024), nullable=False),
    Column("watch_url", String(1024), nullable=False),
    Column("download_url", String(1024), nullable=False),
    Column("featured", Boolean, nullable=False, default=False),
    Column("pinned", Boolean, nullable=False, default=False),
    Column("status", String(50), nullable=False, default="active"),
    Column("created_at", DateTime, nullable=False, default=utcnow),
    Column("updated_at", DateTime, nullable=False, default=utcnow),
    Index("idx_movies_listing", "pinned", "created_at"),
    Index("idx_movies_title", "title"),
    Index("idx_movies_status", "status"),
)

# One row per (movie, label); position keeps the client's label order
movie_genres = Table(
    "movie_genres",
    metadata,
    Column("movie_id", Integer, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_name", String(50), primary_key=True),
    Column("position", Integer, nullable=False, default=0),
    Index("idx_movie_genres_genre_name", "genre_name"),
)

admins = Table(
    "admins",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(100), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("role", String(50), nullable=False, default="admin"),
    Column("last_login", DateTime, nullable=True),
    Column("created_at", DateTime, nullable=False, default=utcnow),
)


class DatabaseManager:
    """
    Owns the async engine shared by the stores.

    Responsibilities:
    - Connection pooling
    - Creating missing tables
    - Reporting table presence and row counts
    """

    TABLES = ["movies", "movie_genres", "admins"]

    def __init__(self, config: Config, engine: Optional[AsyncEngine] = None):
        self.config = config
        self.engine = engine or self._create_engine()
        self.logger = setup_logger("database", config.log_dir)

    def _create_engine(self) -> AsyncEngine:
        """Create the async SQLAlchemy engine with connection pooling."""
        options = {"pool_pre_ping": True}
        if not self.config.is_sqlite:
            options.update(pool_size=5, max_overflow=10, pool_recycle=3600)
        engine = create_async_engine(self.config.database_url, **options)

        if self.config.is_sqlite:
            event.listen(engine.sync_engine, "connect", _register_sqlite_functions)
        return engine

    async def get_existing_tables(self) -> List[str]:
        """Names of the catalog tables that already exist."""
        async with self.engine.connect() as conn:
            names = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        return [t for t in self.TABLES if t in names]

    async def check_and_create_tables(self) -> dict:
        """
        Check which tables exist and create any that are missing.

        Returns:
            {"existing": List[str], "created": List[str], "all_present": bool}
        """
        existing = await self.get_existing_tables()

        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

        created = [t for t in self.TABLES if t not in existing]
        for table in created:
            self.logger.info(f"Created table: {table}")

        present = await self.get_existing_tables()
        return {
            "existing": existing,
            "created": created,
            "all_present": len(present) == len(self.TABLES),
        }

    async def get_status(self) -> dict:
        """Get current database status."""
        existing = await self.get_existing_tables()
        status = {
            "movie_count": 0,
            "admin_count": 0,
            "missing_tables": [t for t in self.TABLES if t not in existing],
            "all_tables_exist": len(existing) == len(self.TABLES),
        }

        async with self.engine.connect() as conn:
            if "movies" in existing:
                status["movie_count"] = await conn.scalar(select(func.count()).select_from(movies))
            if "admins" in existing:
                status["admin_count"] = await conn.scalar(select(func.count()).select_from(admins))

        return status

    async def close(self) -> None:
        """Dispose of the connection pool."""
        await self.engine.dispose()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection, connection_record) -> None:
    """
    Replace SQLite's ASCII-only lower() with Python's str.lower.

    Search lowercases the query in Python, so both sides of the LIKE
    must fold case the same way. MySQL's LOWER is already Unicode aware.
    """
    dbapi_connection.create_function("lower", 1, _unicode_lower)
