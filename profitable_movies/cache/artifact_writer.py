# =========================================
# 📄 File: profitable_movies/cache/artifact_writer.py
# Purpose: Persist flattened rows as the cached CSV artifact read by the charts
# - Header is always key,value,date
# - Written to a temp file next to the target, then renamed over it
# =========================================

import logging
import os
import tempfile
from dataclasses import asdict
from typing import Sequence

import pandas as pd

from profitable_movies.search.result_flattener import FlatRow

log = logging.getLogger(__name__)

ARTIFACT_COLUMNS = ["key", "value", "date"]


def rows_to_frame(rows: Sequence[FlatRow]) -> pd.DataFrame:
    """Build the artifact DataFrame; an empty row list still keeps the columns."""
    return pd.DataFrame([asdict(r) for r in rows], columns=ARTIFACT_COLUMNS, dtype=str)


def write_artifact(rows: Sequence[FlatRow], path: str) -> None:
    """
    Write rows to path atomically.

    Readers either see the previous complete file or the new complete file.
    On failure the temp file is removed and the previous file is untouched.
    """
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    df = rows_to_frame(rows)

    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            df.to_csv(f, index=False, lineterminator="\n")
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, 0o644)  # mkstemp creates 0600; artifacts are served as static files
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    log.info(f"Wrote {len(df)} rows to {path}")
