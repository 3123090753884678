"""JSON connector: a single file mapping table name to rows."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from kumorfm.connectors.base import BaseConnector, Rows


class JSONLoader(BaseConnector):
    """Load tables from a JSON object of the form ``{"users": [{...}, ...]}``."""

    def __init__(self, path: str | Path):
        super().__init__(path=path)
        self.path = Path(path)

        if not self.path.exists():
            raise FileNotFoundError(f"JSON file not found: {self.path}")

    def _read(self) -> Dict[str, Rows]:
        with open(self.path, "r") as f:
            payload = json.load(f)

        if not isinstance(payload, dict) or not all(
            isinstance(rows, list) for rows in payload.values()
        ):
            raise ValueError(
                f"{self.path} must contain an object mapping table names to row lists"
            )
        return payload

    def load_rows(self) -> Dict[str, Rows]:
        tables = self._read()
        self.logger.info(f"Loaded {len(tables)} tables from {self.path}")
        return tables

    def get_table_names(self) -> List[str]:
        return list(self._read().keys())
