"""Row sources for building local tables."""

from kumorfm.connectors.base import BaseConnector, dataframe_to_rows
from kumorfm.connectors.csv_loader import CSVLoader
from kumorfm.connectors.db_connector import DBConnector
from kumorfm.connectors.json_loader import JSONLoader
from kumorfm.connectors.registry import CONNECTOR_REGISTRY, ConnectorFactory

__all__ = [
    "BaseConnector",
    "CSVLoader",
    "CONNECTOR_REGISTRY",
    "ConnectorFactory",
    "DBConnector",
    "JSONLoader",
    "dataframe_to_rows",
]
