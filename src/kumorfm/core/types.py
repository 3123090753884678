"""Metadata, link and validation data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Semantic types
NUMERICAL = "numerical"
CATEGORICAL = "categorical"
TEMPORAL = "temporal"
TEXT = "text"
SEMANTIC_TYPES = (NUMERICAL, CATEGORICAL, TEMPORAL, TEXT)

# Validation error types
MISSING_PRIMARY_KEY = "MISSING_PRIMARY_KEY"
INVALID_LINK = "INVALID_LINK"
CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"

# Validation warning types
HIGH_NULL_RATE = "HIGH_NULL_RATE"
NULLABLE_FOREIGN_KEY = "NULLABLE_FOREIGN_KEY"


@dataclass
class ColumnMetadata:
    """Statistics and inferred semantic type for one column."""

    name: str
    semantic_type: str
    nullable: bool = False
    is_primary_key_candidate: bool = False
    unique_value_count: int = 0
    null_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "semanticType": self.semantic_type,
            "nullable": self.nullable,
            "isPrimaryKeyCandidate": self.is_primary_key_candidate,
            "uniqueValueCount": self.unique_value_count,
            "nullCount": self.null_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ColumnMetadata:
        return cls(
            name=data["name"],
            semantic_type=data.get("semanticType", TEXT),
            nullable=bool(data.get("nullable", False)),
            is_primary_key_candidate=bool(data.get("isPrimaryKeyCandidate", False)),
            unique_value_count=int(data.get("uniqueValueCount", 0)),
            null_count=int(data.get("nullCount", 0)),
        )


@dataclass
class TableMetadata:
    """Inferred or declared metadata owned by a single table."""

    primary_key: Optional[str] = None
    time_column: Optional[str] = None
    semantic_types: Dict[str, str] = field(default_factory=dict)  # column -> type
    columns: Optional[List[ColumnMetadata]] = None  # None until inference runs

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"semanticTypes": dict(self.semantic_types)}
        if self.primary_key is not None:
            data["primaryKey"] = self.primary_key
        if self.time_column is not None:
            data["timeColumn"] = self.time_column
        if self.columns is not None:
            data["columns"] = [col.to_dict() for col in self.columns]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TableMetadata:
        columns = data.get("columns")
        return cls(
            primary_key=data.get("primaryKey"),
            time_column=data.get("timeColumn"),
            semantic_types=dict(data.get("semanticTypes") or {}),
            columns=(
                [ColumnMetadata.from_dict(c) for c in columns]
                if columns is not None
                else None
            ),
        )


@dataclass(frozen=True)
class TableLink:
    """Directed foreign-key edge from ``src_table.fkey`` to ``dst_table``."""

    src_table: str
    fkey: str
    dst_table: str

    def to_dict(self) -> Dict[str, str]:
        return {"srcTable": self.src_table, "fkey": self.fkey, "dstTable": self.dst_table}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TableLink:
        return cls(
            src_table=data["srcTable"],
            fkey=data["fkey"],
            dst_table=data["dstTable"],
        )

    def __str__(self) -> str:
        return f"{self.src_table}.{self.fkey} -> {self.dst_table}"


@dataclass
class TableSchema:
    """Read-only snapshot produced by a table's metadata inference."""

    name: str
    columns: List[ColumnMetadata]
    row_count: int
    metadata: TableMetadata
    relationships: List[TableLink] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "columns": [col.to_dict() for col in self.columns],
            "relationships": [link.to_dict() for link in self.relationships],
            "rowCount": self.row_count,
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class ValidationIssue:
    """A single validation error or warning."""

    type: str
    message: str
    field: Optional[str] = None
    table: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"type": self.type, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        if self.table is not None:
            data["table"] = self.table
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ValidationIssue:
        return cls(
            type=data["type"],
            message=data.get("message", ""),
            field=data.get("field"),
            table=data.get("table"),
        )


@dataclass
class ValidationResult:
    """Outcome of a table or graph validation pass."""

    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def error_types(self) -> List[str]:
        return [e.type for e in self.errors]

    @property
    def warning_types(self) -> List[str]:
        return [w.type for w in self.warnings]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ValidationResult:
        return cls(
            valid=bool(data.get("valid", False)),
            errors=[ValidationIssue.from_dict(e) for e in data.get("errors") or []],
            warnings=[ValidationIssue.from_dict(w) for w in data.get("warnings") or []],
        )
