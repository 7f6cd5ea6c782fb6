"""
CLI flow tests.

Runs the commands end to end against a temporary SQLite database.
"""

import json
import random
from datetime import datetime, timedelta

import pytest

from movie_catalog.cli import build_movie, create_parser, generate_movie_payload, load_movie_payloads, main
from movie_catalog.models import REQUIRED_MOVIE_FIELDS


class TestParser:
    """Argument parsing."""

    def test_seed_defaults(self):
        args = create_parser().parse_args(["seed"])

        assert args.command == "seed"
        assert args.count == 100
        assert args.file is None

    def test_create_admin_requires_username_and_email(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["create-admin", "--username", "root"])

    def test_no_command_prints_help(self, config, capsys):
        assert main([], config=config) == 0
        assert "usage" in capsys.readouterr().out


class TestDemoData:
    """Generated movies."""

    def test_generated_payload_is_complete(self):
        now = datetime(2026, 1, 31, 12, 0, 0)
        payload = generate_movie_payload(random.Random(7), now)

        for field in REQUIRED_MOVIE_FIELDS:
            assert payload[field]
        assert 1990 <= payload["year"] <= now.year
        assert 5.0 <= payload["rating"] <= 9.5
        assert 1 <= len(payload["genres"]) <= 3
        assert now - timedelta(days=30) < payload["created_at"] <= now

    def test_same_seed_same_movies(self):
        now = datetime(2026, 1, 31)
        first = [generate_movie_payload(random.Random(3), now) for _ in range(3)]
        second = [generate_movie_payload(random.Random(3), now) for _ in range(3)]

        assert first == second

    def test_load_payloads_accepts_camel_case(self, tmp_path):
        path = tmp_path / "movies.json"
        path.write_text(json.dumps([{
            "title": "Heat",
            "year": 1995,
            "rating": 8.3,
            "poster": "p",
            "watchUrl": "w",
            "downloadUrl": "d",
        }]))

        [payload] = load_movie_payloads(path)

        assert payload["watch_url"] == "w"
        assert payload["download_url"] == "d"

    def test_build_movie_parses_file_values(self):
        movie = build_movie({
            "title": "Heat",
            "year": "1995",
            "rating": "8.3",
            "poster": "p",
            "watch_url": "w",
            "download_url": "d",
            "genres": "Crime, Drama",
            "created_at": "2024-05-01T10:30:00",
        })

        assert movie.id is None
        assert movie.year == 1995
        assert movie.rating == 8.3
        assert movie.genres == ["Crime", "Drama"]
        assert movie.created_at == movie.updated_at == datetime(2024, 5, 1, 10, 30)

    @pytest.mark.parametrize("change", [
        {"download_url": None},
        {"poster": "  "},
        {"year": "nineteen ninety-five"},
        {"created_at": "yesterday"},
    ])
    def test_build_movie_rejects_bad_entries(self, change):
        payload = {"title": "Heat", "year": 1995, "rating": 8.3, "poster": "p", "watch_url": "w", "download_url": "d"}

        with pytest.raises(ValueError):
            build_movie({**payload, **change})

    def test_load_payloads_requires_a_list(self, tmp_path):
        path = tmp_path / "movies.json"
        path.write_text(json.dumps({"title": "Heat"}))

        with pytest.raises(ValueError):
            load_movie_payloads(path)


class TestCommandsFlow:
    """setup -> create-admin -> seed -> status."""

    def test_setup_then_status(self, config, capsys):
        assert main(["setup"], config=config) == 0
        assert "3 tables created" in capsys.readouterr().out

        assert main(["status"], config=config) == 0
        out = capsys.readouterr().out
        assert "Movies" in out
        assert "Missing tables" not in out

    def test_create_admin_once(self, config, capsys):
        args = ["create-admin", "--username", "root", "--email", "root@example.com", "--password", "s3cret"]

        assert main(args, config=config) == 0
        assert "Admin created" in capsys.readouterr().out

        assert main(args, config=config) == 1
        assert "already exists" in capsys.readouterr().out

    def test_seed_generated_movies(self, config, capsys):
        assert main(["seed", "--count", "5", "--seed", "1"], config=config) == 0
        assert "Added 5 movies" in capsys.readouterr().out

        main(["status"], config=config)
        assert "Movies" in capsys.readouterr().out

    def test_seed_rejects_zero_count(self, config):
        assert main(["seed", "--count", "0"], config=config) == 1

    def test_seed_from_file(self, config, tmp_path, capsys):
        path = tmp_path / "movies.json"
        path.write_text(json.dumps([
            {"title": "Heat", "year": 1995, "rating": 8.3, "poster": "p", "watchUrl": "w", "downloadUrl": "d"},
            {"title": "Ronin", "year": 1998, "rating": 7.2, "poster": "p", "watchUrl": "w", "downloadUrl": "d"},
        ]))

        assert main(["seed", "--file", str(path)], config=config) == 0
        assert "Added 2 movies" in capsys.readouterr().out

    def test_seed_skips_incomplete_entries(self, config, tmp_path, capsys):
        path = tmp_path / "movies.json"
        path.write_text(json.dumps([
            {"title": "Heat", "year": 1995, "rating": 8.3, "poster": "p", "watchUrl": "w", "downloadUrl": "d"},
            {"title": "Ronin", "year": 1998, "rating": 7.2, "poster": "p", "watchUrl": "w"},
        ]))

        assert main(["seed", "--file", str(path)], config=config) == 0
        assert "Added 1 movies (1 skipped)" in capsys.readouterr().out

    def test_missing_secret_is_configuration_error(self, monkeypatch, tmp_path, capsys):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.chdir(tmp_path)

        assert main(["status"]) == 1
        assert "JWT_SECRET_KEY" in capsys.readouterr().out
