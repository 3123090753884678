"""Tests for row connectors."""

import json

import pandas as pd
import pytest
from sqlalchemy import create_engine

from kumorfm.connectors import (
    BaseConnector,
    ConnectorFactory,
    CSVLoader,
    DBConnector,
    JSONLoader,
)
from kumorfm.core import LocalGraph


@pytest.fixture
def csv_dir(tmp_path):
    pd.DataFrame({"user_id": [1, 2], "name": ["Alice", None]}).to_csv(
        tmp_path / "users.csv", index=False
    )
    pd.DataFrame(
        {"order_id": [10, 11], "user_id": [1, 2], "amount": [9.5, 20.0]}
    ).to_csv(tmp_path / "orders.csv", index=False)
    return tmp_path


@pytest.fixture
def sqlite_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'shop.db'}"
    engine = create_engine(url)
    pd.DataFrame({"user_id": [1, 2]}).to_sql("users", engine, index=False)
    pd.DataFrame({"order_id": [1, 2], "user_id": [1, 1]}).to_sql(
        "orders", engine, index=False
    )
    engine.dispose()
    return url


def test_csv_loader(csv_dir):
    loader = CSVLoader(csv_dir)
    rows = loader.load_rows()

    assert loader.get_table_names() == ["orders", "users"]
    assert rows["users"][1] == {"user_id": 2, "name": None}
    assert rows["orders"][0]["amount"] == 9.5


def test_csv_rows_build_a_graph(csv_dir):
    graph = LocalGraph.from_data(CSVLoader(csv_dir).load_rows())

    assert graph.has_link("orders", "user_id", "users")
    assert graph.get_table("users").metadata.columns[1].null_count == 1


def test_csv_loader_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        CSVLoader(tmp_path / "missing")

    with pytest.raises(ValueError, match="No CSV files"):
        CSVLoader(tmp_path).load_rows()


def test_json_loader(tmp_path, shop_rows):
    path = tmp_path / "shop.json"
    path.write_text(json.dumps(shop_rows))

    loader = JSONLoader(path)

    assert loader.load_rows() == shop_rows
    assert loader.get_table_names() == ["users", "orders"]


def test_json_loader_rejects_bad_shape(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"user_id": 1}]))

    with pytest.raises(ValueError):
        JSONLoader(path).load_rows()


def test_db_connector(sqlite_url):
    connector = DBConnector(sqlite_url)
    try:
        rows = connector.load_rows()
    finally:
        connector.close()

    assert sorted(rows) == ["orders", "users"]
    assert rows["orders"] == [{"order_id": 1, "user_id": 1}, {"order_id": 2, "user_id": 1}]


def test_db_connector_table_filter(sqlite_url):
    connector = DBConnector(sqlite_url, tables=["users"])
    assert list(connector.load_rows()) == ["users"]

    connector.table_filter = ["nope"]
    with pytest.raises(ValueError, match="Tables not found"):
        connector.get_table_names()
    connector.close()


def test_factory(csv_dir):
    connector = ConnectorFactory.create_connector("CSV", data_dir=csv_dir)

    assert isinstance(connector, CSVLoader)
    assert "db" in ConnectorFactory.list_connectors()
    with pytest.raises(ValueError, match="Unknown connector type"):
        ConnectorFactory.create_connector("parquet")


def test_register_connector(shop_rows):
    class StaticConnector(BaseConnector):
        def load_rows(self):
            return shop_rows

        def get_table_names(self):
            return list(shop_rows)

    ConnectorFactory.register_connector("static", StaticConnector)
    connector = ConnectorFactory.create_connector("static")

    assert connector.load_rows() == shop_rows
    with pytest.raises(TypeError):
        ConnectorFactory.register_connector("bad", dict)
