"""
Command-line interface for the movie catalog.

Provides commands for:
- setup: Check and create required tables
- status: Show current database status
- create-admin: Register an admin account
- seed: Add demo movies (randomly generated or from a JSON file)
- serve: Run the API with uvicorn
"""

import argparse
import asyncio
import getpass
import json
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from .config import Config
from .database import DatabaseManager
from .models import AdminData, MovieData, missing_movie_fields, parse_genres
from .security import hash_password
from .stores import AdminStore, MovieStore
from .utils import format_number, print_header, print_status_table, progress_bar, utcnow

# Word lists for generated demo titles
SAMPLE_GENRES = [
    "Action", "Adventure", "Animation", "Biography", "Comedy", "Crime",
    "Documentary", "Drama", "Family", "Fantasy", "Horror", "Mystery",
    "Romance", "Sci-Fi", "Thriller", "War",
]
SAMPLE_TITLES = [
    "The Last Stand", "Midnight Echo", "Rising Sun", "Dark Waters", "Lost Paradise",
    "The Hidden Truth", "Eternal Light", "Breaking Point", "Silent Storm", "Beyond Tomorrow",
    "The Final Chapter", "Forgotten Dreams", "Shadow Walker", "Time Travelers", "Ocean's Heart",
    "Night Sky", "Morning Star", "The Lost City", "Brave Hearts", "Desert Storm",
    "Golden Dawn", "Silver Moon", "Crystal Lake", "The Iron Mask", "Fire and Ice",
]
SAMPLE_ADJECTIVES = [
    "Lost", "Hidden", "Secret", "Mysterious", "Dark", "Ancient", "Modern", "Eternal",
    "Final", "First", "Last", "Great", "Rising", "Falling", "Wild", "Silent",
]
SAMPLE_NOUNS = [
    "Kingdom", "Empire", "World", "City", "Planet", "Galaxy", "Dream", "Nightmare",
    "Truth", "Secret", "Journey", "Quest", "Legend", "Myth", "Saga", "Epic",
]

# Seed files may use the API's camelCase names
CAMEL_CASE_KEYS = {"watchUrl": "watch_url", "downloadUrl": "download_url", "createdAt": "created_at"}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all commands."""
    parser = argparse.ArgumentParser(
        prog="movie_catalog",
        description="Movie Catalog - manage the catalog database and run the API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Setup (run first)
  python -m movie_catalog setup

  # Check status
  python -m movie_catalog status

  # Create the first admin
  python -m movie_catalog create-admin --username admin --email admin@example.com

  # Add 50 generated demo movies
  python -m movie_catalog seed --count 50

  # Load curated movies from a JSON list
  python -m movie_catalog seed --file movies.json

  # Run the API
  python -m movie_catalog serve --port 3000
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "setup",
        help="Check for missing tables and create them",
    )

    subparsers.add_parser(
        "status",
        help="Show current database status",
    )

    admin_parser = subparsers.add_parser(
        "create-admin",
        help="Register an admin account",
    )
    admin_parser.add_argument("--username", required=True, help="Admin username")
    admin_parser.add_argument("--email", required=True, help="Admin email")
    admin_parser.add_argument(
        "--password",
        help="Admin password (prompted for when omitted)",
    )

    seed_parser = subparsers.add_parser(
        "seed",
        help="Add demo movies to the catalog",
    )
    seed_parser.add_argument(
        "--count",
        type=int,
        default=100,
        help="Number of generated movies (default: 100)",
    )
    seed_parser.add_argument(
        "--file",
        type=Path,
        help="JSON file with a list of movies to add instead of generated ones",
    )
    seed_parser.add_argument(
        "--seed",
        type=int,
        help="Random seed, for reproducible demo data",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the API server",
    )
    serve_parser.add_argument("--host", help="Bind address (default: API_HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (default: API_PORT)")
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development only)",
    )

    return parser


# ============ DEMO DATA ============


def generate_title(rng: random.Random) -> str:
    """A demo title: a stock title or an adjective/noun combination."""
    roll = rng.random()
    if roll < 0.3:
        return f"The {rng.choice(SAMPLE_ADJECTIVES)} {rng.choice(SAMPLE_NOUNS)}"
    elif roll < 0.6:
        return rng.choice(SAMPLE_TITLES)
    return f"{rng.choice(SAMPLE_ADJECTIVES)} {rng.choice(SAMPLE_NOUNS)}"


def generate_movie_payload(rng: random.Random, now: Optional[datetime] = None) -> dict:
    """One random demo movie, with createdAt spread over the last 30 days."""
    now = now or utcnow()
    slug = "".join(rng.choice("abcdefghijklmnopqrstuvwxyz0123456789") for _ in range(8))
    return {
        "title": generate_title(rng),
        "year": rng.randint(1990, now.year),
        "rating": round(rng.uniform(5.0, 9.5), 1),
        "genres": rng.sample(SAMPLE_GENRES, rng.randint(1, 3)),
        "poster": f"https://picsum.photos/seed/{rng.randint(0, 999)}/300/450",
        "watch_url": f"https://example.com/watch/{slug}",
        "download_url": f"https://example.com/download/{slug}",
        "featured": rng.random() < 0.2,
        "pinned": rng.random() < 0.1,
        "created_at": now - timedelta(days=rng.randint(0, 29)),
    }


def load_movie_payloads(path: Path) -> List[dict]:
    """Read a JSON list of movies; camelCase keys are mapped to field names."""
    with open(path, encoding="utf-8") as f:
        entries = json.load(f)

    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValueError(f"{path} must contain a JSON list of movie objects")

    return [{CAMEL_CASE_KEYS.get(k, k): v for k, v in entry.items()} for entry in entries]


def build_movie(payload: dict) -> MovieData:
    """
    Turn a seed payload into an unsaved movie.

    Raises:
        ValueError: If a required field is missing, year/rating are not
            numbers or createdAt is not an ISO timestamp.
    """
    missing = missing_movie_fields(payload)
    if missing:
        raise ValueError(f"missing {', '.join(missing)}")

    movie = MovieData.from_payload({**payload, "genres": parse_genres(payload.get("genres"))})
    movie.year = int(movie.year)
    movie.rating = float(movie.rating)
    created_at = payload.get("created_at") or utcnow()
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at)
    movie.created_at = movie.updated_at = created_at
    return movie


# ============ COMMANDS ============


async def cmd_setup(db: DatabaseManager) -> int:
    """Run setup command."""
    print_header("Movie Catalog Setup")

    result = await db.check_and_create_tables()

    print("\nTables:")
    for table in DatabaseManager.TABLES:
        if table in result["existing"]:
            print(f"  {table:<20} EXISTS")
        elif table in result["created"]:
            print(f"  {table:<20} CREATED")
        else:
            print(f"  {table:<20} MISSING")

    print(
        f"\nSetup complete! {len(result['created'])} tables created, "
        f"{len(result['existing'])} already existed."
    )

    if result["all_present"]:
        print("All required tables are now present.")
        return 0
    print("WARNING: Some tables are still missing!")
    return 1


async def cmd_status(db: DatabaseManager) -> int:
    """Run status command."""
    print_header("Movie Catalog Status")

    status = await db.get_status()

    print_status_table(
        {
            "Movies": format_number(status["movie_count"]),
            "Admins": format_number(status["admin_count"]),
            "All tables exist": "Yes" if status["all_tables_exist"] else "No",
        },
        title="Database Status",
    )

    if status["missing_tables"]:
        print(f"Missing tables: {', '.join(status['missing_tables'])}")
        print("\nRun 'python -m movie_catalog setup' to create missing tables.")

    return 0


async def cmd_create_admin(db: DatabaseManager, args) -> int:
    """Register an admin account directly in the credential store."""
    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty.")
        return 1

    await db.check_and_create_tables()
    admins = AdminStore(db)

    if await admins.find_by_username_or_email(args.username, args.email):
        print("Could not create admin: Username or email already exists")
        return 1

    try:
        admin = await admins.insert(
            AdminData(username=args.username, password=hash_password(password), email=args.email)
        )
    except IntegrityError:
        print("Could not create admin: Username or email already exists")
        return 1

    print(f"Admin created: id={admin.id} username={admin.username} email={admin.email}")
    return 0


async def cmd_seed(db: DatabaseManager, args) -> int:
    """Add demo movies, generated or from a file."""
    print_header("Seed Movies")

    if args.file:
        payloads = load_movie_payloads(args.file)
    else:
        if args.count < 1:
            print("--count must be at least 1")
            return 1
        rng = random.Random(args.seed)
        now = utcnow()
        payloads = [generate_movie_payload(rng, now) for _ in range(args.count)]

    await db.check_and_create_tables()
    store = MovieStore(db)

    added = 0
    failed = 0
    for payload in progress_bar(payloads, total=len(payloads), desc="Adding movies", unit="movies"):
        try:
            movie = build_movie(payload)
        except (TypeError, ValueError) as e:
            failed += 1
            db.logger.warning(f"Skipped movie {payload.get('title')!r}: {e}")
            continue

        await store.insert(movie)
        added += 1

    print(f"\nAdded {format_number(added)} movies ({format_number(failed)} skipped).")
    return 0 if added or not payloads else 1


def cmd_serve(config: Config, args) -> int:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=args.host or config.api_host,
        port=args.port or config.api_port,
        reload=args.reload or config.api_debug,
    )
    return 0


async def run_command(parsed_args, config: Config) -> int:
    """Run a database command on one event loop, closing the pool afterwards."""
    db = DatabaseManager(config)
    try:
        if parsed_args.command == "setup":
            return await cmd_setup(db)
        elif parsed_args.command == "status":
            return await cmd_status(db)
        elif parsed_args.command == "create-admin":
            return await cmd_create_admin(db, parsed_args)
        elif parsed_args.command == "seed":
            return await cmd_seed(db, parsed_args)
        return 1
    finally:
        await db.close()


def main(args: Optional[list] = None, config: Optional[Config] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 0

    # Load configuration
    if config is None:
        try:
            config = Config.from_env()
        except ValueError as e:
            print(f"Configuration error: {e}")
            print("\nMake sure your .env file contains:")
            print("  JWT_SECRET_KEY=<random secret used to sign admin tokens>")
            print("  DATABASE_URL=<async SQLAlchemy URL> (optional, defaults to local SQLite)")
            print("  or SQL_HOST, SQL_PORT, SQL_USER, SQL_PASS, SQL_DB for MySQL")
            return 1

    try:
        if parsed_args.command == "serve":
            return cmd_serve(config, parsed_args)
        return asyncio.run(run_command(parsed_args, config))

    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        return 130
    except Exception as e:
        print(f"\nError: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
