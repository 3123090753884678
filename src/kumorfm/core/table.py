"""Local table: row data plus inferred or declared metadata."""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from kumorfm.core.errors import DataError, ValidationError
from kumorfm.core.inference import analyze_column
from kumorfm.core.types import (
    CATEGORICAL,
    HIGH_NULL_RATE,
    MISSING_PRIMARY_KEY,
    NUMERICAL,
    TEMPORAL,
    TableMetadata,
    TableSchema,
    ValidationIssue,
    ValidationResult,
)
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

Row = Mapping[str, Any]

HIGH_NULL_RATE_THRESHOLD = 0.5


class LocalTable:
    """A named set of rows with metadata.

    Metadata starts empty (or as supplied) and is filled in by
    :meth:`infer_metadata` or the explicit setters. A table knows nothing
    about the graphs that may contain it.

    Example:
        >>> users = LocalTable([{"user_id": 1}, {"user_id": 2}], "users")
        >>> users.infer_metadata().primary_key
        'user_id'
    """

    def __init__(
        self,
        data: Iterable[Row],
        name: str,
        metadata: Optional[Union[TableMetadata, Dict[str, Any]]] = None,
        columns: Optional[List[str]] = None,
    ):
        """Initialize table.

        Args:
            data: Rows, each a mapping of column name to scalar value
            name: Table name (unique within a graph)
            metadata: Optional pre-computed metadata (object or wire dict)
            columns: Optional explicit column list; by default columns are
                discovered from the keys of the first row
        """
        self._data: List[Row] = data if isinstance(data, list) else list(data)
        self._name = name
        if isinstance(metadata, dict):
            metadata = TableMetadata.from_dict(metadata)
        self._metadata: TableMetadata = metadata or TableMetadata()
        self._declared_columns = list(columns) if columns is not None else None
        self._schema: Optional[TableSchema] = None

    @property
    def data(self) -> List[Row]:
        return self._data

    @property
    def name(self) -> str:
        return self._name

    @property
    def metadata(self) -> TableMetadata:
        return self._metadata

    @property
    def schema(self) -> Optional[TableSchema]:
        """Snapshot from the last inference run, None if never inferred."""
        return self._schema

    @property
    def primary_key(self) -> Optional[str]:
        return self._metadata.primary_key

    @property
    def time_column(self) -> Optional[str]:
        return self._metadata.time_column

    @property
    def row_count(self) -> int:
        return len(self._data)

    @property
    def columns(self) -> List[str]:
        """Currently known column names.

        Taken from column metadata when it exists, otherwise from the
        declared column list or the first row's keys.
        """
        if self._metadata.columns is not None:
            return [col.name for col in self._metadata.columns]
        return self._discover_columns()

    def _discover_columns(self) -> List[str]:
        if self._declared_columns is not None:
            return list(self._declared_columns)
        if not self._data:
            return []
        return list(self._data[0].keys())

    def infer_metadata(self) -> LocalTable:
        """Infer column types, time column and primary key from the rows.

        A primary key or time column that is already set is never replaced;
        only unset fields are filled by the first qualifying column.

        Returns:
            self, for chaining

        Raises:
            DataError: If the table has no rows
        """
        if not self._data:
            raise DataError(
                "Cannot infer metadata from an empty table", {"table": self._name}
            )

        row_count = len(self._data)
        columns = []
        semantic_types: Dict[str, str] = {}

        for column_name in self._discover_columns():
            values = [row.get(column_name) for row in self._data]
            column_meta = analyze_column(values, column_name)
            columns.append(column_meta)

            if column_meta.semantic_type == TEMPORAL:
                semantic_types[column_name] = TEMPORAL
                if not self._metadata.time_column:
                    self._metadata.time_column = column_name
            elif column_meta.semantic_type in (NUMERICAL, CATEGORICAL):
                semantic_types[column_name] = column_meta.semantic_type

            if column_meta.unique_value_count == row_count and not column_meta.nullable:
                column_meta.is_primary_key_candidate = True
                if not self._metadata.primary_key:
                    self._metadata.primary_key = column_name

        self._metadata.semantic_types = semantic_types
        self._metadata.columns = columns

        self._schema = TableSchema(
            name=self._name,
            columns=columns,
            row_count=row_count,
            metadata=self._metadata,
        )

        logger.debug(
            f"Table {self._name}: {len(columns)} columns, {row_count} rows, "
            f"PK={self._metadata.primary_key}, time={self._metadata.time_column}"
        )
        return self

    def set_metadata(self, **fields: Any) -> LocalTable:
        """Merge explicit metadata fields (primary_key, time_column, ...).

        Raises:
            TypeError: If a field name is not a TableMetadata field
        """
        self._metadata = dataclasses.replace(self._metadata, **fields)
        if self._schema is not None:
            self._schema.metadata = self._metadata
        return self

    def _require_column(self, column_name: str) -> None:
        if column_name not in self.columns:
            raise ValidationError(
                f"Column {column_name} does not exist in table {self._name}",
                {"table": self._name, "column": column_name},
            )

    def set_primary_key(self, column_name: str) -> LocalTable:
        """Set the primary key, overriding any inferred value.

        Raises:
            ValidationError: If the column does not exist
        """
        self._require_column(column_name)
        self._metadata.primary_key = column_name
        return self

    def set_time_column(self, column_name: str) -> LocalTable:
        """Set the time column, overriding any inferred value.

        Raises:
            ValidationError: If the column does not exist
        """
        self._require_column(column_name)
        self._metadata.time_column = column_name
        self._metadata.semantic_types[column_name] = TEMPORAL
        return self

    def validate(self) -> ValidationResult:
        """Check the table's metadata without modifying it."""
        errors = []
        warnings = []

        if not self._metadata.primary_key:
            errors.append(
                ValidationIssue(
                    type=MISSING_PRIMARY_KEY,
                    message=f"Table {self._name} is missing a primary key",
                    table=self._name,
                )
            )

        if self._metadata.columns is not None and self._data:
            row_count = len(self._data)
            for col in self._metadata.columns:
                null_rate = col.null_count / row_count
                if null_rate > HIGH_NULL_RATE_THRESHOLD:
                    warnings.append(
                        ValidationIssue(
                            type=HIGH_NULL_RATE,
                            message=f"Column {col.name} has {null_rate:.1%} null values",
                            field=col.name,
                            table=self._name,
                        )
                    )

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def to_dict(self) -> Dict[str, Any]:
        """Serialized form: name, rows and metadata."""
        return {
            "name": self._name,
            "data": self._data,
            "metadata": self._metadata.to_dict(),
        }

    def __repr__(self) -> str:
        return (
            f"LocalTable({self._name}, rows={len(self._data)}, "
            f"columns={len(self.columns)}, pk={self._metadata.primary_key})"
        )
