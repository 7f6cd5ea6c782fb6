"""
Shared fixtures for movie catalog tests.

Every test gets its own SQLite file under tmp_path, so stores, services
and the API run against a real schema without touching ./movie_catalog.db.
"""

from datetime import timedelta
from typing import Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from movie_catalog.config import Config
from movie_catalog.database import DatabaseManager
from movie_catalog.models import MovieData
from movie_catalog.stores import AdminStore, MovieStore
from movie_catalog.utils import utcnow

TEST_SECRET = "test-secret-key"
ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct horse battery staple"


# =============================================================================
# SAMPLE DATA
# =============================================================================

def movie_payload(title: str = "Fighter", **overrides) -> dict:
    """A complete camelCase request body for POST /api/movies."""
    payload = {
        "title": title,
        "year": 2024,
        "rating": 7.5,
        "genres": ["Action", "Drama"],
        "poster": "https://example.com/poster.jpg",
        "watchUrl": "https://example.com/watch",
        "downloadUrl": "https://example.com/download",
    }
    payload.update(overrides)
    return payload


def create_sample_movie(
    title: str,
    genres: Optional[list] = None,
    pinned: bool = False,
    age_minutes: int = 0,
    **overrides,
) -> MovieData:
    """Create an unsaved MovieData, optionally backdated by age_minutes."""
    created_at = utcnow() - timedelta(minutes=age_minutes)
    values = dict(
        title=title,
        year=2020,
        rating=7.0,
        poster=f"https://example.com/{title}.jpg",
        watch_url="https://example.com/watch",
        download_url="https://example.com/download",
        genres=genres if genres is not None else ["Drama"],
        pinned=pinned,
        created_at=created_at,
        updated_at=created_at,
    )
    values.update(overrides)
    return MovieData(**values)


# =============================================================================
# CONFIG & DATABASE
# =============================================================================

@pytest.fixture
def make_config(tmp_path):
    """Factory for a Config pointing at a fresh SQLite file."""

    def _make(**overrides) -> Config:
        values = dict(
            jwt_secret_key=TEST_SECRET,
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
            log_dir=tmp_path / "logs",
        )
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest_asyncio.fixture
async def db(config):
    """DatabaseManager with all tables created."""
    manager = DatabaseManager(config)
    await manager.check_and_create_tables()
    yield manager
    await manager.close()


@pytest.fixture
def movie_store(db):
    return MovieStore(db)


@pytest.fixture
def admin_store(db):
    return AdminStore(db)


@pytest.fixture
def auth_service(admin_store, config):
    from api.services.auth import AuthService

    return AuthService(admin_store, config)


@pytest.fixture
def catalog_service(movie_store, config):
    from api.services.catalog import CatalogService

    return CatalogService(movie_store, config)


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def api_client(config):
    """TestClient around an app built for the test database."""
    from api.main import create_app

    with TestClient(create_app(config)) as client:
        yield client


@pytest.fixture
def admin_token(api_client):
    """Register the default admin through the API and return a bearer token."""
    response = api_client.post(
        "/api/admin/register",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD, "email": ADMIN_EMAIL},
    )
    assert response.status_code == 201

    response = api_client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def add_movie(api_client, auth_headers):
    """Create a movie through the API and return the response body."""

    def _add(title: str = "Fighter", **overrides) -> dict:
        response = api_client.post("/api/movies", json=movie_payload(title, **overrides), headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _add
