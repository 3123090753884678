"""Base connector interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

import pandas as pd

from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

Rows = List[Dict[str, Any]]


def dataframe_to_rows(df: pd.DataFrame) -> Rows:
    """Convert a DataFrame to row dicts, with NaN/NaT turned into None."""
    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


class BaseConnector(ABC):
    """Abstract base class for row sources."""

    def __init__(self, **kwargs):
        """Initialize connector.

        Args:
            **kwargs: Connector-specific configuration
        """
        self.config = kwargs
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def load_rows(self) -> Dict[str, Rows]:
        """Load every table's rows into memory.

        Returns:
            Dict mapping table_name -> list of row dicts
        """

    @abstractmethod
    def get_table_names(self) -> List[str]:
        """Get list of available table names."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.config})"
