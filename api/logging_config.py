"""
Logging configuration for the API.

Every line written through the "api" logger, or one of its children
(api.movies, api.auth, ...), carries the id of the request that
produced it. The id lives in a ContextVar set by the HTTP middleware.
"""

import logging
import os
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Optional

from movie_catalog.utils import setup_logger

API_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s"

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """Stamp records with the current request id ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def setup_api_logger(log_dir: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure the "api" logger.

    Writes api_YYYYMMDD.log under log_dir ($LOG_DIR or ./logs when omitted)
    and echoes INFO and above to stdout.
    """
    if log_dir is None:
        log_dir = Path(os.getenv("LOG_DIR", Path.cwd() / "logs"))

    return setup_logger(
        "api",
        log_dir,
        level=level,
        console_level=logging.INFO,
        fmt=API_LOG_FORMAT,
        log_filter=RequestIdFilter(),
    )


def get_logger(component: str) -> logging.Logger:
    """Child of the API logger, e.g. get_logger("movies") -> "api.movies"."""
    return logging.getLogger(f"api.{component}")


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


logger = setup_api_logger()
