"""
CatalogService tests: pagination, search, genre filtering and mutations.
"""

import pytest

from api.exceptions import NotFoundError, ValidationError
from api.services.catalog import CatalogService
from conftest import create_sample_movie
from movie_catalog.models import parse_genres


async def seed(store, movies):
    return [await store.insert(m) for m in movies]


class TestPagination:
    """Shared listing contract."""

    async def test_first_page_of_thirty(self, catalog_service, movie_store):
        # Every third movie is pinned; age_minutes makes createdAt strictly decreasing
        await seed(movie_store, [
            create_sample_movie(f"Movie {i}", pinned=(i % 3 == 0), age_minutes=i)
            for i in range(30)
        ])

        page = await catalog_service.list_movies(page=1, limit=24)

        assert len(page.items) == 24
        assert page.current_page == 1
        assert page.total_pages == 2
        assert page.total_items == 30

        pinned_flags = [m.pinned for m in page.items]
        assert pinned_flags == sorted(pinned_flags, reverse=True)
        assert pinned_flags.count(True) == 10

        for group in (True, False):
            created = [m.created_at for m in page.items if m.pinned is group]
            assert created == sorted(created, reverse=True)

    async def test_second_page_holds_the_rest(self, catalog_service, movie_store):
        await seed(movie_store, [create_sample_movie(f"Movie {i}", age_minutes=i) for i in range(30)])

        page = await catalog_service.list_movies(page=2, limit=24)

        assert len(page.items) == 6
        assert page.items[-1].title == "Movie 29"

    async def test_empty_catalog(self, catalog_service):
        page = await catalog_service.list_movies()

        assert page.items == []
        assert page.total_items == 0
        assert page.total_pages == 0

    async def test_page_past_the_end_is_empty(self, catalog_service, movie_store):
        await seed(movie_store, [create_sample_movie("Heat"), create_sample_movie("Ronin")])

        page = await catalog_service.list_movies(page=10 ** 18, limit=24)

        assert page.items == []
        assert page.current_page == 10 ** 18
        assert page.total_pages == 1
        assert page.total_items == 2

    @pytest.mark.parametrize("page, limit, expected", [
        (None, None, (1, 24)),
        ("2", "10", (2, 10)),
        ("abc", "-5", (1, 24)),
        (0, 0, (1, 24)),
        (3, 1000, (3, 100)),
    ])
    def test_normalize_pagination(self, config, page, limit, expected):
        service = CatalogService(store=None, config=config)
        assert service.normalize_pagination(page, limit) == expected


class TestSearch:
    """Case-insensitive substring search over titles and genres."""

    async def test_matches_title_and_genre(self, catalog_service, movie_store):
        await seed(movie_store, [
            create_sample_movie("Fighter", genres=["Action"]),
            create_sample_movie("Street Legends", genres=["Street Fighter Saga"]),
            create_sample_movie("Calm Waters", genres=["Drama"]),
        ])

        page = await catalog_service.search("fIGHTER")

        assert sorted(m.title for m in page.items) == ["Fighter", "Street Legends"]
        assert page.total_items == 2

    async def test_case_folding_beyond_ascii(self, catalog_service, movie_store):
        await seed(movie_store, [
            create_sample_movie("Élan Vital", genres=["Drama"]),
            create_sample_movie("Über Alles", genres=["Ação"]),
            create_sample_movie("Plain Title", genres=["Comedy"]),
        ])

        assert [m.title for m in (await catalog_service.search("élan")).items] == ["Élan Vital"]
        assert [m.title for m in (await catalog_service.search("ÉLAN")).items] == ["Élan Vital"]
        assert [m.title for m in (await catalog_service.search("über")).items] == ["Über Alles"]
        assert [m.title for m in (await catalog_service.search("AÇÃO")).items] == ["Über Alles"]

    async def test_wildcards_match_literally(self, catalog_service, movie_store):
        await seed(movie_store, [
            create_sample_movie("100% Love"),
            create_sample_movie("1000 Loves"),
        ])

        page = await catalog_service.search("0%")

        assert [m.title for m in page.items] == ["100% Love"]

    async def test_empty_query_lists_everything(self, catalog_service, movie_store):
        await seed(movie_store, [create_sample_movie("A"), create_sample_movie("B")])

        page = await catalog_service.search("")

        assert page.total_items == 2


class TestByGenre:
    """Any-match filtering over exact genre labels."""

    async def test_any_of_the_requested_genres(self, catalog_service, movie_store):
        await seed(movie_store, [
            create_sample_movie("Heat", genres=["Crime", "Drama"]),
            create_sample_movie("Alien", genres=["Horror", "Sci-Fi"]),
            create_sample_movie("Up", genres=["Animation"]),
        ])

        page = await catalog_service.by_genre("Crime, Sci-Fi")

        assert sorted(m.title for m in page.items) == ["Alien", "Heat"]

    async def test_blank_genre_list_matches_nothing(self, catalog_service, movie_store):
        await seed(movie_store, [create_sample_movie("Heat", genres=["Crime"])])

        page = await catalog_service.by_genre(" , ")

        assert page.items == []
        assert page.total_items == 0

    def test_parse_genres(self):
        assert parse_genres("Action, Drama,,  ") == ["Action", "Drama"]
        assert parse_genres(["Action", " ", "Drama "]) == ["Action", "Drama"]
        assert parse_genres(None) == []


class TestMutations:
    """Create, update and delete."""

    async def test_create_applies_defaults(self, catalog_service):
        movie = await catalog_service.create({
            "title": "Heat",
            "year": 1995,
            "rating": 8.3,
            "poster": "p",
            "watch_url": "w",
            "download_url": "d",
        })

        assert movie.id is not None
        assert movie.genres == []
        assert movie.featured is False
        assert movie.pinned is False
        assert movie.status == "active"
        assert movie.created_at == movie.updated_at

    async def test_create_reports_missing_fields(self, catalog_service):
        with pytest.raises(ValidationError) as exc_info:
            await catalog_service.create({"title": "Heat", "year": 1995, "poster": " "})

        assert "rating" in exc_info.value.message
        assert "poster" in exc_info.value.message
        assert "watchUrl" in exc_info.value.message

    async def test_update_changes_only_supplied_fields(self, catalog_service, movie_store):
        [stored] = await seed(movie_store, [create_sample_movie("Heat", genres=["Crime"], age_minutes=60)])

        updated = await catalog_service.update(stored.id, {"rating": 9.0})

        assert updated.rating == 9.0
        assert updated.title == "Heat"
        assert updated.genres == ["Crime"]
        assert updated.updated_at > stored.updated_at
        assert updated.created_at == stored.created_at

    async def test_update_rejects_null_fields(self, catalog_service, movie_store):
        [stored] = await seed(movie_store, [create_sample_movie("Heat")])

        with pytest.raises(ValidationError):
            await catalog_service.update(stored.id, {"title": None})

    async def test_update_missing_movie(self, catalog_service):
        with pytest.raises(NotFoundError) as exc_info:
            await catalog_service.update(404, {"rating": 1.0})
        assert exc_info.value.status_code == 404

    async def test_delete_twice(self, catalog_service, movie_store):
        [stored] = await seed(movie_store, [create_sample_movie("Heat")])

        await catalog_service.delete(stored.id)

        with pytest.raises(NotFoundError):
            await catalog_service.delete(stored.id)


class TestDashboard:
    """Counts and recent movies."""

    async def test_counts_and_recent(self, catalog_service, movie_store):
        await seed(movie_store, [
            create_sample_movie(f"Movie {i}", age_minutes=i, featured=(i < 2), pinned=(i == 7),
                                status="active" if i < 6 else "hidden")
            for i in range(8)
        ])

        data = await catalog_service.dashboard()

        assert data["stats"] == {
            "total_movies": 8,
            "active_movies": 6,
            "featured_movies": 2,
            "pinned_movies": 1,
        }
        # Recent ignores pinning
        assert [m.title for m in data["recent_movies"]] == [f"Movie {i}" for i in range(5)]
