"""
Elasticsearch client construction and index provisioning.

ensure_index() is the single way the rest of the package obtains a client:
it connects, checks liveness and makes sure the configured index exists
(optionally recreating it) before handing the client back. The caller owns
the returned client and closes it; on failure ensure_index closes it itself.

A timeout given to an operation is a deadline for the whole operation, not
per request: deadline_after() fixes it once and bounded() hands out the
client with whatever time is left for the next request.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from elasticsearch import ApiError, Elasticsearch, TransportError

from profitable_movies.errors import ClusterConnectionError, DeadlineExceededError, IndexProvisioningError

log = logging.getLogger(__name__)

ClientFactory = Callable[[Dict[str, Any], Optional[float]], Elasticsearch]


def response_body(response: Any) -> Any:
    """Unwrap a client response object to its JSON body (plain values pass through)."""
    return getattr(response, "body", response)


# -----------------------
# Deadlines
# -----------------------
def deadline_after(timeout: Optional[float]) -> Optional[float]:
    """Monotonic instant timeout seconds from now (None means unbounded)."""
    if timeout is None:
        return None
    return time.monotonic() + timeout


def time_left(deadline: Optional[float]) -> Optional[float]:
    """Seconds remaining before deadline; raises DeadlineExceededError once it has passed."""
    if deadline is None:
        return None
    left = deadline - time.monotonic()
    if left <= 0:
        raise DeadlineExceededError("DataManager: operation timed out")
    return left


def bounded(client: Elasticsearch, deadline: Optional[float]) -> Elasticsearch:
    """client, limited so its next request cannot outlive deadline."""
    left = time_left(deadline)
    if left is None:
        return client
    return client.options(request_timeout=left)


# -----------------------
# Client + index
# -----------------------
def get_client(cfg: Dict[str, Any], timeout: Optional[float] = None) -> Elasticsearch:
    """
    Build a client for cfg['cluster_url']. No single request made through it
    may take longer than timeout seconds (falls back to cfg['request_timeout_seconds']).
    """
    if timeout is None:
        timeout = cfg.get("request_timeout_seconds")
    kwargs: Dict[str, Any] = {}
    if timeout is not None:
        kwargs["request_timeout"] = timeout
    try:
        return Elasticsearch(cfg["cluster_url"], **kwargs)
    except ValueError as e:
        # Raised for malformed node URLs
        raise ClusterConnectionError(f"DataManager: invalid cluster url {cfg['cluster_url']!r}: {e}") from e


def ensure_index(
    cfg: Dict[str, Any],
    overwrite: bool = False,
    timeout: Optional[float] = None,
    client_factory: ClientFactory = get_client,
) -> Elasticsearch:
    """
    Connect to the cluster and make sure cfg['index_name'] exists.

    - index exists and overwrite: delete, then create
    - index missing: create
    - index exists, no overwrite: reuse as-is

    Every request made here shares one deadline of timeout seconds
    (default cfg['request_timeout_seconds']).
    """
    budget = timeout if timeout is not None else cfg.get("request_timeout_seconds")
    deadline = deadline_after(budget)
    client = client_factory(cfg, timeout)
    try:
        _provision(client, cfg, overwrite, deadline)
    except BaseException:
        client.close()
        raise
    return client


def _provision(client: Elasticsearch, cfg: Dict[str, Any], overwrite: bool, deadline: Optional[float]) -> None:
    index_name = cfg["index_name"]

    if not bounded(client, deadline).ping():
        raise ClusterConnectionError(f"DataManager: cluster at {cfg['cluster_url']} did not answer ping")

    try:
        exists = bool(bounded(client, deadline).indices.exists(index=index_name))
    except (ApiError, TransportError) as e:
        raise ClusterConnectionError(f"DataManager: unable to check index '{index_name}': {e}") from e

    if exists and overwrite:
        log.warning(f"Deleting existing index '{index_name}' before re-import…")
        try:
            bounded(client, deadline).indices.delete(index=index_name)
        except (ApiError, TransportError) as e:
            raise IndexProvisioningError(f"DataManager: unable to delete index '{index_name}': {e}") from e

    if not exists or overwrite:
        log.info(f"Creating index '{index_name}'")
        try:
            created = response_body(bounded(client, deadline).indices.create(index=index_name))
        except (ApiError, TransportError) as e:
            raise IndexProvisioningError(f"DataManager: unable to create index '{index_name}': {e}") from e
        if not (isinstance(created, dict) and created.get("acknowledged") is True):
            raise IndexProvisioningError("DataManager: Unable to determine if elastic index created")
