"""
Shared helpers for the movie catalog.

Logging setup (used by both the database layer and the API), UTC
timestamps, LIKE escaping and the CLI's console output.
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Optional, TypeVar

from tqdm import tqdm

T = TypeVar("T")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LIKE_ESCAPE = "!"


def setup_logger(
    name: str,
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    console_level: Optional[int] = logging.WARNING,
    fmt: str = LOG_FORMAT,
    log_filter: Optional[logging.Filter] = None,
) -> logging.Logger:
    """
    Configure a named logger with a dated log file and a stdout echo.

    Handlers are attached once per process; later calls return the logger
    as the first call configured it.

    Args:
        name: Logger name, also the log file prefix (<name>_YYYYMMDD.log)
        log_dir: Directory for log files (defaults to ./logs)
        level: Level for the logger and its file handler
        console_level: Minimum level echoed to stdout, None for no echo
        fmt: Record format
        log_filter: Filter attached to every handler (e.g. to add fields
                    that fmt refers to)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    log_dir = Path(log_dir) if log_dir is not None else Path.cwd() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_dir / f"{name}_{datetime.now():%Y%m%d}.log")
    file_handler.setLevel(level)
    handlers = [file_handler]

    if console_level is not None:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        handlers.append(console_handler)

    formatter = logging.Formatter(fmt, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        if log_filter is not None:
            handler.addFilter(log_filter)
        logger.addHandler(handler)

    return logger


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches as a literal substring."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


# ============ CONSOLE OUTPUT ============


def progress_bar(iterable: Iterable[T], total: Optional[int] = None, desc: str = "", unit: str = "items") -> Iterator[T]:
    """tqdm bar sized for a 100-column terminal."""
    return tqdm(iterable, total=total, desc=desc, unit=unit, ncols=100)


def format_number(n: int) -> str:
    return f"{n:,}"


def print_header(text: str, width: int = 60) -> None:
    rule = "=" * width
    print(f"{rule}\n{text.center(width)}\n{rule}")


def print_status_table(rows: Mapping[str, object], title: str = "Status") -> None:
    """Print label/value rows under a title, labels padded to one column."""
    print(f"\n{title}\n{'-' * 40}")
    width = max((len(label) for label in rows), default=10) + 2
    for label, value in rows.items():
        print(f"  {label:<{width}}: {value}")
    print()
