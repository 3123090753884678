"""Query building endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from kumorfm.api.models import PQLBuildRequest, PQLBuildResponse
from kumorfm.query import PQLBuilder

router = APIRouter(prefix="/api/v1/pql", tags=["pql"])


def builder_from_request(fields: PQLBuildRequest) -> PQLBuilder:
    """Replay request fields onto a fresh PQLBuilder."""
    builder = PQLBuilder().predict(fields.predict)
    if fields.for_:
        builder.for_(*fields.for_)
    for condition in fields.where or []:
        builder.where(condition)
    if fields.group_by:
        builder.group_by(*fields.group_by)
    if fields.order_by:
        builder.order_by(*fields.order_by)
    if fields.limit is not None:
        builder.limit(fields.limit)
    return builder


@router.post("/build", response_model=PQLBuildResponse)
async def build_query(request: PQLBuildRequest) -> PQLBuildResponse:
    """Render builder fields into a PQL string."""
    return PQLBuildResponse(query=builder_from_request(request).build())
