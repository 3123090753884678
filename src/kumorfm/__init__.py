"""kumorfm - local table/graph metadata and PQL building for a hosted predictive model."""

__version__ = "0.1.0"

# Core engine
from kumorfm.core import (
    APIError,
    ColumnMetadata,
    DataError,
    DuplicateLinkError,
    LocalGraph,
    LocalTable,
    RFMError,
    TableLink,
    TableMetadata,
    TableSchema,
    ValidationError,
    aggregate_rows,
    group_rows,
    ValidationIssue,
    ValidationResult,
    analyze_column,
    deserialize_graph,
    deserialize_table,
    infer_column_type,
    load_graph,
    save_graph,
    serialize_graph,
    serialize_table,
)

# Query building
from kumorfm.query import PQLBuilder

# Prediction client
from kumorfm.client import KumoRFM, PredictionResult, RFMApiClient, RFMConfig

# Config
from kumorfm.utils.config import Config, get_config, load_config


def __getattr__(name):
    """Lazy import for the API server."""
    if name == "create_app":
        from kumorfm.api.server import create_app

        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Core
    "ColumnMetadata",
    "LocalGraph",
    "LocalTable",
    "TableLink",
    "TableMetadata",
    "TableSchema",
    "ValidationIssue",
    "ValidationResult",
    "analyze_column",
    "infer_column_type",
    "aggregate_rows",
    "group_rows",
    # Errors
    "APIError",
    "DataError",
    "DuplicateLinkError",
    "RFMError",
    "ValidationError",
    # Serialization
    "deserialize_graph",
    "deserialize_table",
    "load_graph",
    "save_graph",
    "serialize_graph",
    "serialize_table",
    # Query / client
    "PQLBuilder",
    "KumoRFM",
    "PredictionResult",
    "RFMApiClient",
    "RFMConfig",
    # Config
    "Config",
    "get_config",
    "load_config",
    "create_app",
]
