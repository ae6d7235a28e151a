"""
Registry of cached artifacts: artifact filename -> aggregation shape.

To add a new chart:
    Register its CSV filename here with the keyword field to group on, how
    many top groups to keep and how many release years to go back, then point
    a page descriptor at that filename.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from profitable_movies.errors import UnrecognizedArtifactError


@dataclass(frozen=True)
class SearchSpec:
    """Shape of one artifact's query.

    group_field: keyword field for the top-level terms aggregation
    group_count: number of groups kept, ranked by document count
    year_count: number of release years kept per group, most recent first
    """
    group_field: str
    group_count: int
    year_count: int


DEFAULT_SEARCH_SPECS: Mapping[str, SearchSpec] = MappingProxyType({
    "movie_gross_by_country.csv": SearchSpec("country.keyword", 3, 20),
    "movie_gross_by_genre.csv": SearchSpec("genres.keyword", 6, 30),
})


def lookup_search_spec(search_specs: Mapping[str, SearchSpec], artifact_name: str) -> SearchSpec:
    """Return the spec registered for artifact_name or raise UnrecognizedArtifactError."""
    try:
        return search_specs[artifact_name]
    except KeyError:
        raise UnrecognizedArtifactError(artifact_name) from None
