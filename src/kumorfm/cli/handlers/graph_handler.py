"""Business logic for graph commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from kumorfm.connectors import BaseConnector, ConnectorFactory
from kumorfm.core import LocalGraph, load_graph, save_graph
from kumorfm.core.types import ValidationResult
from kumorfm.utils.config import Config
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)


class GraphHandler:
    """Handler for graph operations.

    Keeps CLI commands thin and focused on user interaction.

    Example:
        >>> handler = GraphHandler(config)
        >>> graph = handler.build_graph(handler.load_rows("csv", "./data/csv"))
    """

    def __init__(self, config: Config):
        self.config = config

    def create_connector(
        self,
        source_type: str,
        source_path: str,
        tables: Optional[List[str]] = None,
    ) -> BaseConnector:
        """Create a connector for the given source type and path."""
        source_type = source_type.lower()
        if source_type == "csv":
            return ConnectorFactory.create_connector("csv", data_dir=source_path)
        if source_type == "json":
            return ConnectorFactory.create_connector("json", path=source_path)
        return ConnectorFactory.create_connector(
            source_type, connection_string=source_path, tables=tables
        )

    def load_rows(
        self,
        source_type: str,
        source_path: str,
        tables: Optional[List[str]] = None,
    ) -> Dict[str, List[Dict[str, Any]]]:
        connector = self.create_connector(source_type, source_path, tables)
        return connector.load_rows()

    def build_graph(
        self,
        rows: Dict[str, List[Dict[str, Any]]],
        infer_metadata: Optional[bool] = None,
    ) -> LocalGraph:
        """Build a graph, inferring metadata and links unless disabled."""
        if infer_metadata is None:
            infer_metadata = self.config.get("graph.infer_metadata", True)
        return LocalGraph.from_data(rows, infer_metadata=infer_metadata)

    def default_output_path(self, name: str) -> Path:
        graphs_dir = Path(self.config.get("data.graphs_dir", "./data/graphs"))
        return graphs_dir / f"{name}.json"

    def save(self, graph: LocalGraph, path: str | Path) -> Path:
        return save_graph(graph, path)

    def load(self, path: str | Path) -> LocalGraph:
        return load_graph(path)

    def validate(self, graph: LocalGraph) -> ValidationResult:
        return graph.validate()

    def get_graph_summary(self, graph: LocalGraph) -> Dict[str, Any]:
        return {
            "Tables": len(graph.tables),
            "Links": len(graph.links),
            "Rows": sum(t.row_count for t in graph.tables),
        }
