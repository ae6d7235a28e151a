"""
Decode the nested aggregation response and flatten it into chart rows.

The response is validated against an explicit schema first, so a bucket
key that is not a string (or any other unexpected shape) fails fast with
ResultDecodeError instead of producing a half-written artifact.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from profitable_movies.errors import ResultDecodeError
from profitable_movies.search.index_provisioner import response_body
from profitable_movies.search.query_builder import AVG_GROSS_AGG_NAME, TERMS_AGG_NAME, YEARS_AGG_NAME

log = logging.getLogger(__name__)


class StrictResponseModel(BaseModel):
    # strict: no coercion of ints into str keys; extra: ES adds doc_count etc.
    model_config = ConfigDict(extra="ignore", strict=True)


class AvgMetric(StrictResponseModel):
    value: Optional[float] = None


class YearBucket(StrictResponseModel):
    key: str
    avg_gross: Optional[AvgMetric] = Field(default=None, alias=AVG_GROSS_AGG_NAME)


class YearsAggregation(StrictResponseModel):
    buckets: List[YearBucket]


class GroupBucket(StrictResponseModel):
    key: str
    years: YearsAggregation = Field(alias=YEARS_AGG_NAME)


class GroupsAggregation(StrictResponseModel):
    buckets: List[GroupBucket]


class Aggregations(StrictResponseModel):
    groups: GroupsAggregation = Field(alias=TERMS_AGG_NAME)


class AggregationResponse(StrictResponseModel):
    aggregations: Aggregations


@dataclass(frozen=True)
class FlatRow:
    """One artifact line: group value, average gross (whole units), year."""
    key: str
    value: str
    date: str


def decode_response(response: Any) -> AggregationResponse:
    """Validate a raw search response (dict or client response object)."""
    body = response_body(response)
    try:
        return AggregationResponse.model_validate(body)
    except ValidationError as e:
        raise ResultDecodeError(f"DataManager: Couldn't interpret search result: {e}") from e


def flatten(response: Any) -> List[FlatRow]:
    """
    Walk groups then years and emit one FlatRow per year bucket with a
    defined average. Bucket order is preserved as returned by the cluster.
    """
    decoded = decode_response(response)

    rows: List[FlatRow] = []
    for group in decoded.aggregations.groups.buckets:
        for year in group.years.buckets:
            if year.avg_gross is None or year.avg_gross.value is None:
                continue
            rows.append(FlatRow(key=group.key, value=f"{year.avg_gross.value:.0f}", date=year.key))

    log.debug(f"Flattened {len(decoded.aggregations.groups.buckets)} groups into {len(rows)} rows")
    return rows
