"""Graph build and validation endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from kumorfm.api.models import (
    GraphBuildRequest,
    GraphBuildResponse,
    GraphValidateRequest,
    TableSummary,
    ValidationResponse,
)
from kumorfm.core import LocalGraph, LocalTable, deserialize_graph, serialize_graph
from kumorfm.core.serialization import to_jsonable
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/graph", tags=["graph"])


@router.post("/build", response_model=GraphBuildResponse)
async def build_graph(request: GraphBuildRequest) -> GraphBuildResponse:
    """Build a graph from raw rows, optionally inferring metadata and links.

    Link inference only finds links between tables that have a primary key,
    so ``infer_links`` without ``infer_metadata`` normally yields none.
    """
    tables = []
    for name, rows in request.data.items():
        table = LocalTable(rows, name)
        if request.infer_metadata:
            table.infer_metadata()
        tables.append(table)

    graph = LocalGraph(tables)
    if request.infer_links:
        graph.infer_links()

    logger.info(f"Built {graph!r} via API")

    return GraphBuildResponse(
        graph=to_jsonable(serialize_graph(graph)),
        metadata=[
            TableSummary(
                name=table.name,
                table_schema=(
                    to_jsonable(table.schema.to_dict()) if table.schema else None
                ),
                row_count=table.row_count,
            )
            for table in tables
        ],
    )


@router.post("/validate", response_model=ValidationResponse)
async def validate_graph(request: GraphValidateRequest) -> ValidationResponse:
    """Rebuild a serialized graph and return its validation result."""
    graph = deserialize_graph(request.graph.to_payload())
    return ValidationResponse(**graph.validate().to_dict())
