"""Wire and file serialization for tables and graphs."""

from __future__ import annotations

import datetime
import json
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from kumorfm.core.graph import LocalGraph
from kumorfm.core.table import LocalTable
from kumorfm.core.types import TableLink
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_table(table: LocalTable) -> Dict[str, Any]:
    """Convert a table to ``{"name", "data", "metadata"}``."""
    return table.to_dict()


def deserialize_table(payload: Dict[str, Any]) -> LocalTable:
    """Rebuild a table, inferring metadata only when none is supplied.

    Raises:
        DataError: If metadata is absent and the table has no rows
    """
    metadata = payload.get("metadata")
    table = LocalTable(payload.get("data") or [], payload["name"], metadata)
    if metadata is not None:
        return table
    return table.infer_metadata()


def serialize_graph(graph: LocalGraph) -> Dict[str, Any]:
    """Convert a graph to ``{"tables": [...], "links": [...]}``."""
    return graph.to_dict()


def deserialize_graph(payload: Dict[str, Any]) -> LocalGraph:
    """Rebuild a graph and replay its links in order.

    Raises:
        ValidationError: On the first link that cannot be added
    """
    tables = [deserialize_table(t) for t in payload.get("tables", [])]
    graph = LocalGraph(tables)
    for link_data in payload.get("links", []):
        link = TableLink.from_dict(link_data)
        graph.link(link.src_table, link.fkey, link.dst_table)
    return graph


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime.date, pd.Timestamp)):
        return value.isoformat()
    if isinstance(value, np.generic):
        return value.item()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(payload: Dict[str, Any], indent: Optional[int] = 2) -> str:
    """Dump a serialized table/graph, writing dates as ISO strings."""
    return json.dumps(payload, indent=indent, default=_json_default)


def to_jsonable(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a serialized table/graph containing only JSON types."""
    return json.loads(to_json(payload, indent=None))


def save_graph(graph: LocalGraph, path: str | Path) -> Path:
    """Save a graph to a JSON file.

    Args:
        graph: Graph to save
        path: Destination file

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        f.write(to_json(serialize_graph(graph)))

    logger.info(f"Saved graph to {path}")
    return path


def load_graph(path: str | Path) -> LocalGraph:
    """Load a graph from a JSON file written by :func:`save_graph`."""
    with open(path, "r") as f:
        payload = json.load(f)

    graph = deserialize_graph(payload)
    logger.info(f"Loaded {graph!r} from {path}")
    return graph
