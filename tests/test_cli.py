"""Tests for the kumorfm CLI."""

import json

import pytest
from click.testing import CliRunner

from kumorfm.cli.cli_main import cli
from kumorfm.client import rfm
from kumorfm.core.errors import APIError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def shop_json(tmp_path, shop_rows):
    path = tmp_path / "shop.json"
    path.write_text(json.dumps(shop_rows))
    return path


@pytest.fixture
def graph_json(runner, shop_json, tmp_path):
    out = tmp_path / "graph.json"
    result = runner.invoke(cli, ["graph", "build", "json", str(shop_json), "-o", str(out)])
    assert result.exit_code == 0, result.output
    return out


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_graph_build(runner, graph_json):
    payload = json.loads(graph_json.read_text())

    assert payload["links"] == [{"srcTable": "orders", "fkey": "user_id", "dstTable": "users"}]


def test_graph_build_output(runner, shop_json, tmp_path):
    out = tmp_path / "graph.json"
    result = runner.invoke(cli, ["graph", "build", "json", str(shop_json), "-o", str(out)])

    assert "users: 2 rows, 1 columns, PK=user_id" in result.output
    assert "orders.user_id -> users" in result.output


def test_graph_build_no_infer(runner, shop_json, tmp_path):
    out = tmp_path / "raw.json"
    result = runner.invoke(
        cli, ["graph", "build", "json", str(shop_json), "--no-infer", "-o", str(out)]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text())["links"] == []


def test_graph_build_missing_source(runner, tmp_path):
    result = runner.invoke(cli, ["graph", "build", "json", str(tmp_path / "nope.json")])

    assert result.exit_code != 0
    assert "File not found" in result.output


def test_graph_validate_valid(runner, graph_json):
    result = runner.invoke(cli, ["graph", "validate", str(graph_json)])

    assert result.exit_code == 0, result.output
    assert "Graph is valid" in result.output


def test_graph_validate_invalid_exits_nonzero(runner, tmp_path):
    path = tmp_path / "cyclic.json"
    path.write_text(
        json.dumps(
            {
                "tables": [
                    {"name": "a", "data": [{"id": 1, "b_ref": 1}]},
                    {"name": "b", "data": [{"id": 1, "a_ref": 1}]},
                ],
                "links": [
                    {"srcTable": "a", "fkey": "b_ref", "dstTable": "b"},
                    {"srcTable": "b", "fkey": "a_ref", "dstTable": "a"},
                ],
            }
        )
    )
    result = runner.invoke(cli, ["graph", "validate", str(path)])

    assert result.exit_code == 1
    assert "CIRCULAR_REFERENCE" in result.output
    assert "Graph is invalid" in result.output


def test_graph_show(runner, graph_json):
    result = runner.invoke(cli, ["graph", "show", str(graph_json)])

    assert result.exit_code == 0, result.output
    assert "=== Graph Metadata ===" in result.output
    assert "=== Graph Visualization ===" in result.output


def test_pql_build(runner):
    result = runner.invoke(
        cli,
        [
            "pql", "build",
            "--predict", "COUNT(orders.order_id)",
            "--for", "user_id",
            "--where", "a > 1",
            "--where", "b < 2",
            "--limit", "3",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == (
        "PREDICT COUNT(orders.order_id) FOR user_id WHERE a > 1 AND b < 2 LIMIT 3"
    )


def test_pql_parse(runner):
    result = runner.invoke(cli, ["pql", "parse", "PREDICT SUM(orders.amount) FOR user_id"])

    assert result.exit_code == 0
    assert result.output.strip() == "SUM(orders.amount)"


def test_pql_parse_without_predict(runner):
    result = runner.invoke(cli, ["pql", "parse", "SELECT 1"])

    assert result.exit_code != 0


def test_predict_without_api_key(runner, graph_json):
    result = runner.invoke(cli, ["predict", str(graph_json), "PREDICT x"])

    assert result.exit_code != 0
    assert "No API key" in result.output


def test_predict(runner, graph_json, monkeypatch):
    def fake_request(self, method, path, payload=None):
        return {"predictions": [{"user_id": 1, "value": 3}]}

    monkeypatch.setattr(rfm.RFMApiClient, "request", fake_request)

    result = runner.invoke(
        cli, ["predict", str(graph_json), "PREDICT SUM(orders.amount)", "--api-key", "k"]
    )

    assert result.exit_code == 0, result.output
    body = json.loads(result.output)
    assert body["query"] == "PREDICT SUM(orders.amount)"
    assert body["metadata"]["rowCount"] == 1


def test_graph_build_summary_shows_keys_and_links(runner, shop_json, tmp_path):
    result = runner.invoke(
        cli, ["graph", "build", "json", str(shop_json), "-o", str(tmp_path / "g.json")]
    )

    assert result.exit_code == 0, result.output
    assert "users: 2 rows, 1 columns, PK=user_id" in result.output
    assert "Links:" in result.output
    assert "- orders.user_id -> users" in result.output


def test_graph_build_summary_shows_time_column(runner, tmp_path):
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps(
            {
                "events": [
                    {"event_id": 1, "created_at": "2024-01-01"},
                    {"event_id": 2, "created_at": "2024-01-02"},
                ]
            }
        )
    )
    result = runner.invoke(cli, ["graph", "build", "json", str(path), "--no-save"])

    assert result.exit_code == 0, result.output
    assert "PK=event_id, time=created_at" in result.output
    assert "No links inferred" in result.output


def test_graph_validate_not_json_shows_hint(runner, tmp_path):
    path = tmp_path / "graph.json"
    path.write_text("tables: []")
    result = runner.invoke(cli, ["graph", "validate", str(path)])

    assert result.exit_code != 0
    assert "Not a JSON file" in result.output
    assert "kumorfm graph build" in result.output


def test_predict_unauthorized_shows_api_key_hint(runner, graph_json, monkeypatch):
    def fake_request(self, method, path, payload=None):
        raise APIError("Request failed: 401 unauthorized", status_code=401)

    monkeypatch.setattr(rfm.RFMApiClient, "request", fake_request)

    result = runner.invoke(
        cli, ["predict", str(graph_json), "PREDICT SUM(orders.amount)", "--api-key", "bad"]
    )

    assert result.exit_code != 0
    assert "Prediction service error (HTTP 401)" in result.output
    assert "KUMO_API_KEY" in result.output
