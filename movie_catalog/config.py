"""
Configuration management for the movie catalog.

Loads configuration from environment variables and provides
a centralized Config dataclass for all settings.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_SQLITE_URL = "sqlite+aiosqlite:///./movie_catalog.db"


@dataclass
class Config:
    """Centralized configuration from environment variables."""

    # JWT settings
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24

    # Database
    database_url: str = DEFAULT_SQLITE_URL
    auto_create_tables: bool = True

    # Pagination
    default_page_size: int = 24
    max_page_size: int = 100

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_debug: bool = False

    # CORS settings
    allowed_origins: List[str] = field(default_factory=list)

    # Paths
    log_dir: Path = field(default_factory=lambda: Path.cwd() / "logs")

    @classmethod
    def from_env(cls, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_path: Optional path to .env file. If not provided,
                     looks for .env in the current directory.

        Returns:
            Config instance with loaded values.

        Raises:
            ValueError: If required environment variables are missing.
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        # Required variables
        jwt_secret_key = os.getenv("JWT_SECRET_KEY") or os.getenv("JWT_SECRET")
        if not jwt_secret_key:
            raise ValueError("JWT_SECRET_KEY environment variable is required")

        jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        jwt_expire_minutes = int(os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24)))

        # Database config: explicit URL wins, then MySQL parts, then local SQLite
        database_url = os.getenv("DATABASE_URL") or cls._mysql_url_from_env() or DEFAULT_SQLITE_URL
        auto_create_tables = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"

        default_page_size = int(os.getenv("DEFAULT_PAGE_SIZE", "24"))
        max_page_size = int(os.getenv("MAX_PAGE_SIZE", "100"))

        # API settings
        api_host = os.getenv("API_HOST", "0.0.0.0")
        api_port = int(os.getenv("API_PORT", os.getenv("PORT", "3000")))
        api_debug = os.getenv("API_DEBUG", "false").lower() == "true"

        # CORS settings
        allowed_origins = cls.allowed_origins_from_env()

        log_dir = Path(os.getenv("LOG_DIR", Path.cwd() / "logs"))

        return cls(
            jwt_secret_key=jwt_secret_key,
            jwt_algorithm=jwt_algorithm,
            jwt_expire_minutes=jwt_expire_minutes,
            database_url=database_url,
            auto_create_tables=auto_create_tables,
            default_page_size=default_page_size,
            max_page_size=max_page_size,
            api_host=api_host,
            api_port=api_port,
            api_debug=api_debug,
            allowed_origins=allowed_origins,
            log_dir=log_dir,
        )

    @staticmethod
    def allowed_origins_from_env() -> List[str]:
        """Parse ALLOWED_ORIGINS (comma separated) without requiring the rest of the config."""
        origins_str = os.getenv("ALLOWED_ORIGINS", "")
        return [o.strip() for o in origins_str.split(",") if o.strip()]

    @staticmethod
    def _mysql_url_from_env() -> Optional[str]:
        """Build an async MySQL URL from SQL_* variables, if they are set."""
        db_user = os.getenv("SQL_USER", "")
        db_name = os.getenv("SQL_DB", "")
        if not db_user or not db_name:
            return None

        db_host = os.getenv("SQL_HOST", "localhost")
        db_port = int(os.getenv("SQL_PORT", "3306"))
        db_password = os.getenv("SQL_PASS", "")
        return (
            f"mysql+aiomysql://{db_user}:{db_password}"
            f"@{db_host}:{db_port}/{db_name}"
        )

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")
