"""
Movie Import Pipeline
---------------------
 - Loads the IMDB movie CSV into the Elasticsearch index from config
 - Optionally recreates the index first (overwrite); the CSV is opened
   before the index is touched, so an unreadable file never wipes it
 - One document per data row, id = data row number
 - Stops at the first malformed row or failed insert (already inserted documents stay)
"""

import csv
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, TextIO, Tuple

from elasticsearch import ApiError, TransportError

from config.config_loader import get_config
from profitable_movies.errors import BulkLoadError, RecordShapeError
from profitable_movies.etl.record_parser import parse_movie
from profitable_movies.search.index_provisioner import ensure_index

log = logging.getLogger(__name__)


# -----------------------
# Data preparation
# -----------------------
def read_movie_rows(f: TextIO) -> Iterator[Tuple[int, List[str]]]:
    """
    Yield (data_row_number, fields) for every data row of the open CSV file f.
    The header row and blank lines are skipped; numbering starts at 1.
    """
    reader = csv.reader(f, delimiter=",")
    next(reader, None)  # header
    row_number = 0
    for fields in reader:
        if not fields:
            continue
        row_number += 1
        yield row_number, fields


# -----------------------
# Data loading
# -----------------------
def import_movies(
    csv_path: str,
    overwrite: bool = False,
    *,
    cfg: Optional[Dict[str, Any]] = None,
    connect: Callable[..., Any] = ensure_index,
    timeout: Optional[float] = None,
) -> int:
    """
    Insert every movie of csv_path into cfg['index_name'].

    Returns the number of documents inserted. Raises OSError when csv_path
    cannot be opened (the index is left alone), RecordShapeError on the
    first row with the wrong field count and BulkLoadError when a document
    cannot be indexed. timeout bounds index provisioning as a whole and
    each insert on its own.
    """
    if cfg is None:
        cfg = get_config()

    with open(csv_path, newline="", encoding="utf-8") as f:
        client = connect(cfg, overwrite=overwrite, timeout=timeout)
        try:
            inserted = _insert_rows(client, cfg, read_movie_rows(f), csv_path)
        finally:
            client.close()

    log.info(f"✅ Added {inserted} movies to index '{cfg['index_name']}'")
    return inserted


def _insert_rows(client: Any, cfg: Dict[str, Any], rows: Iterator[Tuple[int, List[str]]], csv_path: str) -> int:
    index_name = cfg["index_name"]
    doc_type = cfg["type_name"]
    inserted = 0

    for row_number, fields in rows:
        try:
            movie = parse_movie(fields)
        except RecordShapeError as e:
            raise RecordShapeError(f"{e} at data row {row_number} of {csv_path}") from e

        try:
            client.index(index=index_name, id=str(row_number), document=movie.to_document(doc_type))
        except (ApiError, TransportError) as e:
            raise BulkLoadError(
                f"DataManager: failed to insert '{movie.movie_title}' (row {row_number}) into '{index_name}': {e}"
            ) from e

        inserted += 1
        log.debug(f"Added movie '{movie.movie_title}'")

    return inserted
