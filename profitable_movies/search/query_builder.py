"""
Two-level aggregation query: top groups -> release years -> average gross.
"""

from typing import Any, Dict

from profitable_movies.registry import SearchSpec

TERMS_AGG_NAME = "termsAgg"
YEARS_AGG_NAME = "yearsAgg"
AVG_GROSS_AGG_NAME = "avgGrossAgg"

YEAR_FIELD = "titleYear.keyword"
GROSS_FIELD = "grossUSD"
DOC_TYPE_FIELD = "docType.keyword"


def build_query(spec: SearchSpec, type_name: str) -> Dict[str, Any]:
    """
    Build the search body for spec, scoped to documents of type_name.

    Groups are ranked by document count (top spec.group_count), years by
    descending value (latest spec.year_count). Only aggregations are
    returned, never hits.
    """
    avg_gross = {"avg": {"field": GROSS_FIELD}}

    years = {
        "terms": {
            "field": YEAR_FIELD,
            "size": spec.year_count,
            "order": {"_key": "desc"},
        },
        "aggs": {AVG_GROSS_AGG_NAME: avg_gross},
    }

    groups = {
        "terms": {
            "field": spec.group_field,
            "size": spec.group_count,
            "order": {"_count": "desc"},
        },
        "aggs": {YEARS_AGG_NAME: years},
    }

    return {
        "size": 0,
        "query": {"term": {DOC_TYPE_FIELD: type_name}},
        "aggs": {TERMS_AGG_NAME: groups},
    }
