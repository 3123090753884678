"""Database connector using SQLAlchemy."""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
from sqlalchemy import MetaData, Table, create_engine, inspect, select, text
from sqlalchemy.engine import Engine

from kumorfm.connectors.base import BaseConnector, Rows, dataframe_to_rows


class DBConnector(BaseConnector):
    """Load table rows from a relational database via SQLAlchemy."""

    def __init__(
        self,
        connection_string: str,
        schema: Optional[str] = None,
        tables: Optional[List[str]] = None,
    ):
        """Initialize database connector.

        Args:
            connection_string: SQLAlchemy connection string
            schema: Database schema name (optional)
            tables: Optional list of specific tables to load (loads all if None)

        Example:
            >>> connector = DBConnector("sqlite:///shop.db", tables=["users", "orders"])
            >>> rows = connector.load_rows()
        """
        super().__init__(
            connection_string=connection_string,
            schema=schema,
            tables=tables,
        )

        self.connection_string = connection_string
        self.schema = schema
        self.table_filter = tables

        self.logger.info("Creating database engine")
        self.engine: Engine = create_engine(connection_string)

        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            self.logger.info("Database connection successful")
        except Exception as e:
            self.logger.error(f"Failed to connect to database: {e}")
            self.engine.dispose()
            raise

    def get_table_names(self) -> List[str]:
        all_tables = inspect(self.engine).get_table_names(schema=self.schema)

        if self.table_filter:
            missing = [t for t in self.table_filter if t not in all_tables]
            if missing:
                raise ValueError(f"Tables not found: {missing}. Available: {all_tables}")
            return list(self.table_filter)

        return all_tables

    def load_rows(self) -> Dict[str, Rows]:
        table_names = self.get_table_names()

        if not table_names:
            raise ValueError(f"No tables found in database (schema={self.schema})")

        self.logger.info(f"Loading {len(table_names)} tables from database")

        tables = {}
        for table_name in table_names:
            self.logger.info(f"Loading table: {table_name}")
            df = self.load_single_table(table_name)
            tables[table_name] = dataframe_to_rows(df)
            self.logger.debug(f"  Loaded {len(df)} rows, {len(df.columns)} columns")

        self.logger.info(f"Successfully loaded {len(tables)} tables")
        return tables

    def load_single_table(self, table_name: str) -> pd.DataFrame:
        """Read one table with SELECT * through a reflected Table object."""
        table = Table(table_name, MetaData(), schema=self.schema, autoload_with=self.engine)
        with self.engine.connect() as conn:
            return pd.read_sql(select(table), conn)

    def close(self) -> None:
        self.engine.dispose()
        self.logger.info("Database connection closed")
