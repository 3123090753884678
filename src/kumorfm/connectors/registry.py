"""Connector registry and factory."""

from __future__ import annotations

from typing import Dict, List, Type

from kumorfm.connectors.base import BaseConnector
from kumorfm.connectors.csv_loader import CSVLoader
from kumorfm.connectors.db_connector import DBConnector
from kumorfm.connectors.json_loader import JSONLoader
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

CONNECTOR_REGISTRY: Dict[str, Type[BaseConnector]] = {
    "csv": CSVLoader,
    "json": JSONLoader,
    "database": DBConnector,
    "db": DBConnector,  # Alias
}


class ConnectorFactory:
    """Factory for creating connector instances."""

    @staticmethod
    def create_connector(connector_type: str, **kwargs) -> BaseConnector:
        """Create connector instance.

        Args:
            connector_type: Connector type ('csv', 'json', 'database', 'db')
            **kwargs: Connector-specific configuration

        Returns:
            BaseConnector instance

        Raises:
            ValueError: If connector type is not supported

        Example:
            >>> connector = ConnectorFactory.create_connector("csv", data_dir="./data/csv")
        """
        connector_type_lower = connector_type.lower().strip()

        if connector_type_lower not in CONNECTOR_REGISTRY:
            available = ", ".join(sorted(CONNECTOR_REGISTRY.keys()))
            raise ValueError(
                f"Unknown connector type: {connector_type}. Available: {available}"
            )

        connector_class = CONNECTOR_REGISTRY[connector_type_lower]
        logger.info(f"Creating {connector_class.__name__} connector")

        return connector_class(**kwargs)

    @staticmethod
    def register_connector(name: str, connector_class: Type[BaseConnector]) -> None:
        """Register a custom connector.

        Raises:
            TypeError: If the class does not inherit from BaseConnector
        """
        if not issubclass(connector_class, BaseConnector):
            raise TypeError(
                f"Connector class must inherit from BaseConnector, got {connector_class}"
            )

        CONNECTOR_REGISTRY[name.lower()] = connector_class
        logger.info(f"Registered custom connector: {name}")

    @staticmethod
    def list_connectors() -> List[str]:
        return sorted(CONNECTOR_REGISTRY.keys())
