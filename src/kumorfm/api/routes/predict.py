"""Prediction endpoint, forwarding to the hosted service."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from kumorfm.api.models import PredictRequest
from kumorfm.api.routes.pql import builder_from_request
from kumorfm.client import KumoRFM, RFMConfig
from kumorfm.core import deserialize_graph
from kumorfm.utils.config import get_config
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["predict"])


@router.post("/predict")
def predict(request: PredictRequest) -> Dict[str, Any]:
    """Run a query against the submitted graph.

    Raises:
        HTTPException: 503 if no API key is configured for the service
    """
    query = request.query or builder_from_request(request.builder).build()
    graph = deserialize_graph(request.graph.to_payload())

    try:
        rfm_config = RFMConfig.from_config(get_config())
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e))

    model = KumoRFM(graph, rfm_config)
    try:
        result = model.predict(query, use_cache=request.use_cache)
    finally:
        model.client.close()
    return result.to_dict()
