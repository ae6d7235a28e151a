# tests/unit/test_result_flattener.py
# ------------------------------------------------------------
# Purpose: Unit tests for decoding + flattening aggregation responses.
# ------------------------------------------------------------

from types import SimpleNamespace

import pytest

from conftest import aggregation_response
from profitable_movies.errors import ResultDecodeError
from profitable_movies.search.result_flattener import FlatRow, flatten


def test_drama_example_skips_undefined_average():
    response = aggregation_response({"Drama": [("2015", 120000000), ("2014", None)]})
    assert flatten(response) == [FlatRow("Drama", "120000000", "2015")]


def test_rows_are_group_major_then_year_minor():
    response = aggregation_response({
        "USA": [("2016", 1.0), ("2015", 2.0)],
        "UK": [("2016", 3.0)],
    })
    rows = flatten(response)
    assert [(r.key, r.date) for r in rows] == [("USA", "2016"), ("USA", "2015"), ("UK", "2016")]


def test_average_is_formatted_without_decimals():
    response = aggregation_response({"USA": [("2016", 1234567.6), ("2015", 99.4)]})
    assert [r.value for r in flatten(response)] == ["1234568", "99"]


def test_group_without_years_yields_no_rows():
    response = aggregation_response({"France": [], "USA": [("2016", 5.0)]})
    assert flatten(response) == [FlatRow("USA", "5", "2016")]


def test_missing_average_aggregation_is_skipped():
    response = aggregation_response({"USA": [("2016", 5.0)]})
    del response["aggregations"]["termsAgg"]["buckets"][0]["yearsAgg"]["buckets"][0]["avgGrossAgg"]
    assert flatten(response) == []


def test_empty_result_has_no_rows():
    assert flatten(aggregation_response({})) == []


def test_flatten_is_repeatable_on_same_input():
    response = aggregation_response({"Drama": [("2015", 1.0), ("2014", 2.0)], "Comedy": [("2015", 3.0)]})
    assert flatten(response) == flatten(response)


def test_client_response_objects_are_unwrapped():
    response = SimpleNamespace(body=aggregation_response({"Drama": [("2015", 10.0)]}))
    assert flatten(response) == [FlatRow("Drama", "10", "2015")]


def test_non_string_group_key_is_a_decode_error():
    response = aggregation_response({"Drama": [("2015", 10.0)]})
    response["aggregations"]["termsAgg"]["buckets"][0]["key"] = 42
    with pytest.raises(ResultDecodeError):
        flatten(response)


def test_non_string_year_key_is_a_decode_error():
    response = aggregation_response({"Drama": [(2015, 10.0)]})
    with pytest.raises(ResultDecodeError):
        flatten(response)


@pytest.mark.parametrize("body", [
    {},
    {"aggregations": {}},
    {"aggregations": {"termsAgg": {"buckets": [{"key": "Drama"}]}}},
    {"aggregations": {"termsAgg": {"buckets": "nope"}}},
])
def test_unexpected_shapes_are_decode_errors(body):
    with pytest.raises(ResultDecodeError):
        flatten(body)
