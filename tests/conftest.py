# tests/conftest.py
# ------------------------------------------------------------
# Purpose: Shared fixtures so unit tests never need a real
# Elasticsearch cluster or the repo's config/{ENV}.yaml files.
# ------------------------------------------------------------

from unittest.mock import MagicMock

import pytest
import yaml

from profitable_movies.etl.record_parser import MOVIE_FIELD_COUNT


def _write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


@pytest.fixture
def cfg(tmp_path):
    """A validated-looking config dict pointing the cache at tmp_path."""
    return {
        "environment": "test",
        "log_level": "WARNING",
        "cache_expiry_minutes": 60,
        "cluster_url": "http://localhost:9200",
        "data_path": str(tmp_path / "data"),
        "type_name": "movie",
        "index_name": "movies",
    }


@pytest.fixture
def config_file(tmp_path, cfg):
    """The cfg fixture written out as a YAML file."""
    return _write_yaml(tmp_path / "test.yaml", cfg)


@pytest.fixture
def write_config(tmp_path):
    """Factory: write an arbitrary dict to a YAML file and return its path."""
    def _write(data, name="custom.yaml"):
        return _write_yaml(tmp_path / name, data)
    return _write


def aggregation_response(groups):
    """
    Build a search response body from {group: [(year, avg_or_None), ...]}.
    """
    buckets = []
    for group, years in groups.items():
        buckets.append({
            "key": group,
            "doc_count": 10,
            "yearsAgg": {
                "doc_count_error_upper_bound": 0,
                "sum_other_doc_count": 0,
                "buckets": [
                    {"key": year, "doc_count": 1, "avgGrossAgg": {"value": avg}}
                    for year, avg in years
                ],
            },
        })
    return {
        "took": 3,
        "timed_out": False,
        "hits": {"total": {"value": 0, "relation": "eq"}, "hits": []},
        "aggregations": {
            "termsAgg": {
                "doc_count_error_upper_bound": 0,
                "sum_other_doc_count": 0,
                "buckets": buckets,
            }
        },
    }


@pytest.fixture
def fake_client():
    """A MagicMock standing in for an Elasticsearch client with an existing index."""
    client = MagicMock()
    client.ping.return_value = True
    client.indices.exists.return_value = True
    client.indices.create.return_value = {"acknowledged": True, "index": "movies"}
    client.search.return_value = aggregation_response({"Drama": [("2015", 120000000.0)]})
    client.index.return_value = {"result": "created"}
    # Per-request option overrides hand back the same client
    client.options.return_value = client
    return client


@pytest.fixture
def connect(fake_client):
    """Stand-in for ensure_index that hands back fake_client."""
    return MagicMock(return_value=fake_client)


def movie_row(**overrides):
    """
    A well-formed 28-field IMDB row; overrides are {column_index: value}
    passed as keyword arguments named c<index>, e.g. movie_row(c8="abc").
    """
    row = [
        "Color",                    # 0 color
        "James Cameron",            # 1 director_name
        "723",                      # 2 num_critic_for_reviews
        "178",                      # 3 duration
        "0",                        # 4 director_facebook_likes
        "855",                      # 5 actor_3_facebook_likes
        "Joel David Moore",         # 6 actor_2_name
        "1000",                     # 7 actor_1_facebook_likes
        "760505847",                # 8 gross
        "Action|Adventure|Fantasy|Sci-Fi",  # 9 genres
        "CCH Pounder",              # 10 actor_1_name
        "Avatar",                   # 11 movie_title
        "886204",                   # 12 num_voted_users
        "4834",                     # 13 cast_total_facebook_likes
        "Wes Studi",                # 14 actor_3_name
        "0",                        # 15 facenumber_in_poster
        "avatar|future|marine|native|paraplegic",  # 16 plot_keywords
        "http://www.imdb.com/title/tt0499549/?ref_=fn_tt_tt_1",  # 17 movie_imdb_link
        "3054",                     # 18 num_user_for_reviews
        "English",                  # 19 language
        "USA",                      # 20 country
        "PG-13",                    # 21 content_rating
        "237000000",                # 22 budget
        "2009",                     # 23 title_year
        "936",                      # 24 actor_2_facebook_likes
        "7.9",                      # 25 imdb_score
        "1.78",                     # 26 aspect_ratio
        "33000",                    # 27 movie_facebook_likes
    ]
    assert len(row) == MOVIE_FIELD_COUNT
    for key, value in overrides.items():
        row[int(key[1:])] = value
    return row
