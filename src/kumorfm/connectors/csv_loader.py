"""CSV connector: one table per CSV file."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pandas as pd

from kumorfm.connectors.base import BaseConnector, Rows, dataframe_to_rows


class CSVLoader(BaseConnector):
    """Load tables from CSV files in a directory."""

    def __init__(
        self,
        data_dir: str | Path,
        file_pattern: str = "*.csv",
        **pandas_kwargs,
    ):
        """Initialize CSV loader.

        Args:
            data_dir: Directory containing CSV files
            file_pattern: Glob pattern for CSV files
            **pandas_kwargs: Additional arguments passed to pd.read_csv()

        Example:
            >>> rows = CSVLoader("./data/csv").load_rows()
            >>> graph = LocalGraph.from_data(rows)
        """
        super().__init__(data_dir=data_dir, file_pattern=file_pattern, **pandas_kwargs)

        self.data_dir = Path(data_dir)
        self.file_pattern = file_pattern
        self.pandas_kwargs = pandas_kwargs

        if not self.data_dir.exists():
            raise FileNotFoundError(f"Data directory not found: {self.data_dir}")

        if not self.data_dir.is_dir():
            raise NotADirectoryError(f"Not a directory: {self.data_dir}")

    def _csv_files(self) -> List[Path]:
        return sorted(self.data_dir.glob(self.file_pattern))

    def load_rows(self) -> Dict[str, Rows]:
        """Load all CSV files in the directory, keyed by file stem."""
        csv_files = self._csv_files()

        if not csv_files:
            raise ValueError(
                f"No CSV files found in {self.data_dir} "
                f"matching pattern '{self.file_pattern}'"
            )

        self.logger.info(f"Found {len(csv_files)} CSV files in {self.data_dir}")

        tables = {}
        for csv_file in csv_files:
            table_name = csv_file.stem
            self.logger.info(f"Loading {csv_file.name} as table '{table_name}'")
            df = pd.read_csv(csv_file, **self.pandas_kwargs)
            tables[table_name] = dataframe_to_rows(df)
            self.logger.debug(f"  Loaded {len(df)} rows, {len(df.columns)} columns")

        self.logger.info(f"Successfully loaded {len(tables)} tables")
        return tables

    def get_table_names(self) -> List[str]:
        return [f.stem for f in self._csv_files()]
