"""
Entry point for running the catalog tools as a module.

Usage:
    python -m movie_catalog <command>
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
