"""Core table/graph metadata engine."""

from kumorfm.core.aggregation import aggregate_rows, group_rows
from kumorfm.core.errors import (
    APIError,
    DataError,
    DuplicateLinkError,
    RFMError,
    ValidationError,
)
from kumorfm.core.graph import LocalGraph
from kumorfm.core.inference import analyze_column, infer_column_type
from kumorfm.core.serialization import (
    deserialize_graph,
    deserialize_table,
    load_graph,
    save_graph,
    serialize_graph,
    serialize_table,
)
from kumorfm.core.table import LocalTable
from kumorfm.core.types import (
    ColumnMetadata,
    TableLink,
    TableMetadata,
    TableSchema,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Errors
    "APIError",
    "DataError",
    "DuplicateLinkError",
    "RFMError",
    "ValidationError",
    # Types
    "ColumnMetadata",
    "TableLink",
    "TableMetadata",
    "TableSchema",
    "ValidationIssue",
    "ValidationResult",
    # Engine
    "LocalGraph",
    "LocalTable",
    "analyze_column",
    "infer_column_type",
    # Aggregation
    "aggregate_rows",
    "group_rows",
    # Serialization
    "deserialize_graph",
    "deserialize_table",
    "load_graph",
    "save_graph",
    "serialize_graph",
    "serialize_table",
]
