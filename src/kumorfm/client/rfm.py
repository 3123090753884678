"""Prediction facade pairing a local graph with the remote service."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from kumorfm.client.api_client import RFMApiClient, RFMConfig
from kumorfm.core.graph import LocalGraph
from kumorfm.core.types import ValidationResult
from kumorfm.query.builder import PQLBuilder
from kumorfm.utils.config import get_config
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PredictionResult:
    """Predictions returned for one query."""

    query: str
    predictions: List[Dict[str, Any]] = field(default_factory=list)
    execution_time: float = 0.0  # seconds, measured client-side
    row_count: int = 0
    model_version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "predictions": self.predictions,
            "metadata": {
                "executionTime": self.execution_time,
                "rowCount": self.row_count,
                "modelVersion": self.model_version,
            },
        }


class KumoRFM:
    """Send PQL queries about a local graph to the prediction service.

    Example:
        >>> model = KumoRFM(graph, RFMConfig(api_key="..."))
        >>> query = PQLBuilder().predict("SUM(orders.amount)").for_("user_id")
        >>> model.predict(query).predictions
    """

    def __init__(
        self,
        graph: LocalGraph,
        config: Optional[RFMConfig] = None,
        client: Optional[RFMApiClient] = None,
    ):
        """Initialize model facade.

        Args:
            graph: Graph the queries refer to
            config: Connection settings (built from the global config if None)
            client: Optional pre-built API client; takes precedence over config
        """
        self._graph = graph
        if client is None:
            client = RFMApiClient(config or RFMConfig.from_config(get_config()))
        self.client = client
        self._cache: Dict[str, PredictionResult] = {}

    @property
    def graph(self) -> LocalGraph:
        return self._graph

    def update_graph(self, graph: LocalGraph) -> None:
        """Replace the graph; cached results are dropped."""
        self._graph = graph
        self.clear_cache()

    def clear_cache(self) -> None:
        self._cache.clear()

    def predict(
        self, query: Union[str, PQLBuilder], use_cache: bool = False
    ) -> PredictionResult:
        """Run one query on the remote service.

        Args:
            query: Query string or builder
            use_cache: Return and store results in the in-memory cache

        Returns:
            PredictionResult

        Raises:
            ValidationError: If a builder has no PREDICT target
            APIError: If the service call fails
        """
        if isinstance(query, PQLBuilder):
            query = query.build()

        if use_cache and query in self._cache:
            logger.debug(f"Cache hit for query: {query}")
            return self._cache[query]

        start = time.perf_counter()
        body = self.client.execute_query(query, self._graph)
        elapsed = time.perf_counter() - start

        predictions = body.get("predictions", [])
        metadata = body.get("metadata") or {}
        result = PredictionResult(
            query=query,
            predictions=predictions,
            execution_time=elapsed,
            row_count=metadata.get("rowCount", len(predictions)),
            model_version=metadata.get("modelVersion"),
        )
        logger.info(f"Query returned {result.row_count} rows in {elapsed:.2f}s")

        if use_cache:
            self._cache[query] = result
        return result

    def validate_graph(self) -> ValidationResult:
        """Validate the current graph on the service rather than locally."""
        return self.client.validate_graph(self._graph)

    def batch_predict(
        self, queries: List[Union[str, PQLBuilder]], use_cache: bool = False
    ) -> List[PredictionResult]:
        """Run queries sequentially, in order."""
        return [self.predict(q, use_cache=use_cache) for q in queries]
