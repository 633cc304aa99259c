"""Shared Rich consoles for taskchat output."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(stderr: bool = False) -> Console:
    """Console for results, or for diagnostics when *stderr* is set."""
    return Console(stderr=stderr, highlight=not stderr)
