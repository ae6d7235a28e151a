"""
Error taxonomy for the data manager.

Every error raised by the core derives from DataManagerError, except
configuration problems which surface as config.config_loader.ConfigError.
"""

from config.config_loader import ConfigError


class DataManagerError(Exception):
    """Base class for data manager failures."""


class UnrecognizedArtifactError(DataManagerError):
    """The requested artifact name has no registered search."""

    def __init__(self, artifact_name: str):
        super().__init__(f"DataManager: no updater associated with given filename: {artifact_name}")
        self.artifact_name = artifact_name


class ClusterConnectionError(DataManagerError):
    """The Elasticsearch cluster could not be reached or did not answer."""


class DeadlineExceededError(ClusterConnectionError):
    """The operation ran out of its time allowance before finishing."""


class IndexProvisioningError(DataManagerError):
    """The target index could not be created or recreated."""


class ResultDecodeError(DataManagerError):
    """The aggregation response did not have the expected shape."""


class RecordShapeError(DataManagerError):
    """An input record does not have the expected number of fields."""


class BulkLoadError(DataManagerError):
    """A document could not be inserted during an import."""


__all__ = [
    "BulkLoadError",
    "ClusterConnectionError",
    "ConfigError",
    "DataManagerError",
    "DeadlineExceededError",
    "IndexProvisioningError",
    "RecordShapeError",
    "ResultDecodeError",
    "UnrecognizedArtifactError",
]
