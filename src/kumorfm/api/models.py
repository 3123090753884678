"""Pydantic models for API requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class LinkModel(BaseModel):
    """Foreign-key link in wire format."""

    src_table: str = Field(..., alias="srcTable", description="Table holding the foreign key")
    fkey: str = Field(..., description="Foreign-key column")
    dst_table: str = Field(..., alias="dstTable", description="Referenced table")

    model_config = {"populate_by_name": True}


class SerializedTableModel(BaseModel):
    """Table rows plus optional pre-computed metadata."""

    name: str = Field(..., min_length=1)
    data: List[Dict[str, Any]] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = Field(
        None, description="Trusted as-is when present; inferred otherwise"
    )


class SerializedGraphModel(BaseModel):
    """Tables and the links between them."""

    tables: List[SerializedTableModel]
    links: List[LinkModel] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class GraphBuildRequest(BaseModel):
    """Build a graph from raw rows."""

    data: Dict[str, List[Dict[str, Any]]] = Field(..., description="Table name -> rows")
    infer_metadata: bool = Field(True, alias="inferMetadata")
    infer_links: bool = Field(True, alias="inferLinks")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "data": {
                        "users": [{"user_id": 1}, {"user_id": 2}],
                        "orders": [
                            {"order_id": 1, "user_id": 1, "amount": 10},
                            {"order_id": 2, "user_id": 2, "amount": 20},
                        ],
                    },
                    "inferMetadata": True,
                    "inferLinks": True,
                }
            ]
        },
    }


class TableSummary(BaseModel):
    name: str
    table_schema: Optional[Dict[str, Any]] = Field(None, alias="schema")
    row_count: int = Field(..., alias="rowCount")

    model_config = {"populate_by_name": True}


class GraphBuildResponse(BaseModel):
    graph: Dict[str, Any]
    metadata: List[TableSummary]


class GraphValidateRequest(BaseModel):
    graph: SerializedGraphModel


class ValidationIssueModel(BaseModel):
    type: str
    message: str
    field: Optional[str] = None
    table: Optional[str] = None


class ValidationResponse(BaseModel):
    valid: bool
    errors: List[ValidationIssueModel]
    warnings: List[ValidationIssueModel]


class PQLBuildRequest(BaseModel):
    """Query fragments in builder form."""

    predict: str = Field(..., min_length=1, description="PREDICT target")
    for_: Optional[List[str]] = Field(None, alias="for")
    where: Optional[List[str]] = None
    group_by: Optional[List[str]] = Field(None, alias="groupBy")
    order_by: Optional[List[str]] = Field(None, alias="orderBy")
    limit: Optional[int] = Field(None, gt=0)

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "predict": "SUM(orders.amount)",
                    "for": ["user_id"],
                    "where": ['orders.created_at > "2024-01-01"'],
                }
            ]
        },
    }


class PQLBuildResponse(BaseModel):
    query: str


class PredictRequest(BaseModel):
    """Prediction request: a query string or builder fields, plus the graph."""

    query: Optional[str] = None
    builder: Optional[PQLBuildRequest] = None
    graph: SerializedGraphModel
    use_cache: bool = Field(
        False,
        alias="useCache",
        description=(
            "Reuse cached results within this request only. Each request builds "
            "a new client with an empty cache, so repeated requests always reach "
            "the prediction service."
        ),
    )

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _require_query_or_builder(self) -> PredictRequest:
        if not self.query and self.builder is None:
            raise ValueError("Either query or builder must be provided")
        return self


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")
    timestamp: float = Field(..., description="Server time (epoch seconds)")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    detail: Optional[Any] = Field(None, description="Additional error details")
