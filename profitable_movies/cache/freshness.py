# =========================================
# 📄 File: profitable_movies/cache/freshness.py
# Purpose: Keep cached chart artifacts fresh
# - Decide staleness from file mtime vs. configured TTL
# - Refresh: query -> flatten -> atomic write
# - One refresh in flight per artifact; other callers wait (bounded by timeout) and reuse it
# =========================================

import logging
import os
import threading
import time
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from elasticsearch import ApiError, TransportError

from config.config_loader import build_artifact_path, get_config
from profitable_movies.cache.artifact_writer import write_artifact
from profitable_movies.errors import ClusterConnectionError, DeadlineExceededError
from profitable_movies.registry import DEFAULT_SEARCH_SPECS, SearchSpec, lookup_search_spec
from profitable_movies.search.index_provisioner import bounded, deadline_after, ensure_index, time_left
from profitable_movies.search.query_builder import build_query
from profitable_movies.search.result_flattener import flatten

log = logging.getLogger(__name__)


def is_stale(path: str, ttl_minutes: int, now: float) -> bool:
    """True when path is missing or at least ttl_minutes old."""
    try:
        mtime = os.stat(path).st_mtime
    except FileNotFoundError:
        return True
    return (now - mtime) / 60.0 >= ttl_minutes


class CacheFreshnessController:
    """
    Refreshes registered artifacts on demand.

    Collaborators are injected so the controller can be driven without a
    real cluster: load_config returns the validated config dict, connect
    returns a ready Elasticsearch client (see ensure_index), clock returns
    the current epoch time.
    """

    def __init__(
        self,
        search_specs: Mapping[str, SearchSpec] = DEFAULT_SEARCH_SPECS,
        *,
        load_config: Callable[[], Dict[str, Any]] = get_config,
        connect: Callable[..., Any] = ensure_index,
        clock: Callable[[], float] = time.time,
    ):
        self.search_specs = MappingProxyType(dict(search_specs))
        self._load_config = load_config
        self._connect = connect
        self._clock = clock
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, artifact_name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(artifact_name, threading.Lock())

    def refresh(self, artifact_name: str, timeout: Optional[float] = None) -> bool:
        """
        Make sure artifact_name is fresh on disk.

        Returns True when the artifact was rewritten, False when it was
        already fresh. Raises UnrecognizedArtifactError for unknown names
        (before any I/O) and propagates every other failure; the previous
        artifact is never removed.

        timeout (default cfg['request_timeout_seconds']) bounds the whole
        call, including the wait for a refresh of the same artifact already
        in flight. A waiter that runs out of time gets the last-good
        artifact (False) when one exists, DeadlineExceededError otherwise.
        """
        spec = lookup_search_spec(self.search_specs, artifact_name)
        cfg = self._load_config()
        path = build_artifact_path(cfg, artifact_name)
        ttl = cfg["cache_expiry_minutes"]
        if timeout is None:
            timeout = cfg.get("request_timeout_seconds")
        deadline = deadline_after(timeout)

        if not is_stale(path, ttl, self._clock()):
            return False

        lock = self._lock_for(artifact_name)
        wait = time_left(deadline)
        if not lock.acquire(timeout=-1 if wait is None else wait):
            if os.path.exists(path):
                log.warning(f"{artifact_name}: refresh still running after {timeout}s, serving last-good copy")
                return False
            raise DeadlineExceededError(f"DataManager: timed out waiting for {artifact_name} to be built")
        try:
            # Another caller may have refreshed it while we waited
            if not is_stale(path, ttl, self._clock()):
                log.debug(f"{artifact_name} refreshed by a concurrent caller")
                return False

            log.info(f"Refreshing {artifact_name} (older than {ttl} min or missing)")
            started = time.time()
            client = self._connect(cfg, overwrite=False, timeout=time_left(deadline))
            try:
                response = self._search(bounded(client, deadline), cfg, spec)
            finally:
                client.close()
            rows = flatten(response)
            write_artifact(rows, path)
            log.info(f"Refreshed {artifact_name} in {time.time() - started:.2f}s | rows={len(rows)}")
        finally:
            lock.release()
        return True

    @staticmethod
    def _search(client: Any, cfg: Dict[str, Any], spec: SearchSpec) -> Any:
        body = build_query(spec, cfg["type_name"])
        try:
            return client.search(index=cfg["index_name"], **body)
        except (ApiError, TransportError) as e:
            raise ClusterConnectionError(f"DataManager: search on '{cfg['index_name']}' failed: {e}") from e
