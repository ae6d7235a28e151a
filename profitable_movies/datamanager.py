"""
Entry points used by the web layer.

update_data() is backed by one process-wide controller so concurrent
requests for the same artifact share a single refresh.
"""

from typing import Optional

from profitable_movies.cache.freshness import CacheFreshnessController
from profitable_movies.etl.import_movies import import_movies

_controller = CacheFreshnessController()


def update_data(filename: str, timeout: Optional[float] = None) -> bool:
    """Ensure the named artifact is fresh within timeout seconds; True if it was rewritten."""
    return _controller.refresh(filename, timeout=timeout)


def registered_artifacts() -> list:
    """Names of every artifact update_data() accepts."""
    return sorted(_controller.search_specs)


__all__ = ["import_movies", "registered_artifacts", "update_data"]
