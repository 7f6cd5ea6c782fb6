"""
Data models for the movie catalog.

Provides dataclasses for type-safe data handling between the stores,
the services and the API layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Union

from .utils import utcnow

# Fields a stored movie must always carry
REQUIRED_MOVIE_FIELDS = ("title", "year", "rating", "poster", "watch_url", "download_url")

# Fields a client may set on create/update
MOVIE_FIELDS = REQUIRED_MOVIE_FIELDS + ("genres", "featured", "pinned", "status")


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def missing_movie_fields(payload: Mapping[str, Any]) -> List[str]:
    """Required fields that are absent or blank in a movie payload."""
    return [f for f in REQUIRED_MOVIE_FIELDS if is_blank(payload.get(f))]


def parse_genres(genres: Union[str, Iterable[str], None]) -> List[str]:
    """Split a comma-separated genre list; blank labels are dropped."""
    if genres is None:
        return []
    if isinstance(genres, str):
        genres = genres.split(",")
    return [g.strip() for g in genres if g and g.strip()]


@dataclass
class MovieData:
    """A movie record in the catalog."""

    title: str
    year: int
    rating: float
    poster: str
    watch_url: str
    download_url: str
    genres: List[str] = field(default_factory=list)
    featured: bool = False
    pinned: bool = False
    status: str = "active"
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for the movies table (genres live elsewhere)."""
        return {
            "title": self.title,
            "year": self.year,
            "rating": self.rating,
            "poster": self.poster,
            "watch_url": self.watch_url,
            "download_url": self.download_url,
            "featured": self.featured,
            "pinned": self.pinned,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any], genres: Optional[List[str]] = None) -> "MovieData":
        """Create MovieData from a movies row and its genre labels."""
        return cls(
            id=row["id"],
            title=row["title"],
            year=row["year"],
            rating=row["rating"],
            poster=row["poster"],
            watch_url=row["watch_url"],
            download_url=row["download_url"],
            genres=list(genres or []),
            featured=bool(row["featured"]),
            pinned=bool(row["pinned"]),
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MovieData":
        """Create a new, unsaved MovieData from client-supplied fields."""
        values = {k: payload[k] for k in MOVIE_FIELDS if payload.get(k) is not None}
        return cls(**values)


@dataclass
class AdminData:
    """An admin account. `password` always holds the bcrypt hash."""

    username: str
    password: str
    email: str
    role: str = "admin"
    last_login: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    id: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "username": self.username,
            "password": self.password,
            "email": self.email,
            "role": self.role,
            "last_login": self.last_login,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AdminData":
        """Create AdminData from an admins row."""
        return cls(
            id=row["id"],
            username=row["username"],
            password=row["password"],
            email=row["email"],
            role=row["role"],
            last_login=row["last_login"],
            created_at=row["created_at"],
        )
