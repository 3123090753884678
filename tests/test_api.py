"""Tests for the FastAPI server."""

import pytest
from fastapi.testclient import TestClient

from kumorfm.api.server import create_app
from kumorfm.client.api_client import RFMApiClient


@pytest.fixture
def client(default_config):
    return TestClient(create_app(default_config))


@pytest.fixture
def serialized_shop(client, shop_rows):
    response = client.post("/api/v1/graph/build", json={"data": shop_rows})
    return response.json()["graph"]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"


def test_root_lists_endpoints(client):
    body = client.get("/").json()

    assert body["endpoints"]["graph_build"] == "/api/v1/graph/build"


def test_graph_build(client, shop_rows):
    response = client.post("/api/v1/graph/build", json={"data": shop_rows})

    assert response.status_code == 200
    body = response.json()
    assert body["graph"]["links"] == [
        {"srcTable": "orders", "fkey": "user_id", "dstTable": "users"}
    ]
    summaries = {m["name"]: m for m in body["metadata"]}
    assert summaries["orders"]["rowCount"] == 2
    assert summaries["users"]["schema"]["metadata"]["primaryKey"] == "user_id"


def test_graph_build_without_inference(client, shop_rows):
    response = client.post(
        "/api/v1/graph/build",
        json={"data": shop_rows, "inferMetadata": False, "inferLinks": False},
    )

    body = response.json()
    assert body["graph"]["links"] == []
    assert all(m["schema"] is None for m in body["metadata"])


def test_graph_build_empty_table_is_data_error(client):
    response = client.post("/api/v1/graph/build", json={"data": {"empty": []}})

    assert response.status_code == 400
    assert response.json()["error"] == "DATA_ERROR"


def test_graph_validate(client, serialized_shop):
    response = client.post("/api/v1/graph/validate", json={"graph": serialized_shop})

    assert response.status_code == 200
    assert response.json() == {"valid": True, "errors": [], "warnings": []}


def test_graph_validate_reports_cycle(client):
    graph = {
        "tables": [
            {"name": "a", "data": [{"id": 1, "b_ref": 1}]},
            {"name": "b", "data": [{"id": 1, "a_ref": 1}]},
        ],
        "links": [
            {"srcTable": "a", "fkey": "b_ref", "dstTable": "b"},
            {"srcTable": "b", "fkey": "a_ref", "dstTable": "a"},
        ],
    }
    body = client.post("/api/v1/graph/validate", json={"graph": graph}).json()

    assert body["valid"] is False
    assert [e["type"] for e in body["errors"]] == ["CIRCULAR_REFERENCE"]


def test_graph_validate_bad_link_is_400(client, serialized_shop):
    serialized_shop["links"].append(
        {"srcTable": "orders", "fkey": "missing_id", "dstTable": "users"}
    )
    response = client.post("/api/v1/graph/validate", json={"graph": serialized_shop})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert "missing_id" in body["message"]


def test_pql_build(client):
    response = client.post(
        "/api/v1/pql/build",
        json={
            "predict": "COUNT(orders.order_id)",
            "for": ["user_id"],
            "where": ["a > 1", "b < 2"],
            "limit": 5,
        },
    )

    assert response.status_code == 200
    assert response.json()["query"] == (
        "PREDICT COUNT(orders.order_id) FOR user_id WHERE a > 1 AND b < 2 LIMIT 5"
    )


def test_pql_build_requires_predict(client):
    response = client.post("/api/v1/pql/build", json={"for": ["user_id"]})

    assert response.status_code == 422


def test_predict_requires_query_or_builder(client, serialized_shop):
    response = client.post("/api/v1/predict", json={"graph": serialized_shop})

    assert response.status_code == 422


def test_predict_without_api_key_is_503(client, serialized_shop):
    response = client.post(
        "/api/v1/predict",
        json={"query": "PREDICT SUM(orders.amount)", "graph": serialized_shop},
    )

    assert response.status_code == 503


def test_predict_forwards_builder_query(client, serialized_shop, default_config, monkeypatch):
    """Test the builder fields are rendered and sent to the service."""
    default_config.set("client.api_key", "test-key")
    sent = {}

    def fake_request(self, method, path, payload=None):
        sent.update(method=method, path=path, payload=payload)
        return {"predictions": [{"user_id": 1, "value": 12.5}], "metadata": {"modelVersion": "v1"}}

    monkeypatch.setattr(RFMApiClient, "request", fake_request)

    response = client.post(
        "/api/v1/predict",
        json={
            "builder": {"predict": "SUM(orders.amount)", "for": ["user_id"]},
            "graph": serialized_shop,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["query"] == "PREDICT SUM(orders.amount) FOR user_id"
    assert body["metadata"]["rowCount"] == 1
    assert body["metadata"]["modelVersion"] == "v1"
    assert sent["path"] == "/predict"
    assert sent["payload"]["graph"]["links"][0]["dstTable"] == "users"


def test_predict_service_error_is_502(client, serialized_shop, default_config, monkeypatch):
    from kumorfm.core.errors import APIError

    default_config.set("client.api_key", "test-key")

    def failing_request(self, method, path, payload=None):
        raise APIError("Request failed: 500 boom", status_code=500)

    monkeypatch.setattr(RFMApiClient, "request", failing_request)

    response = client.post(
        "/api/v1/predict",
        json={"query": "PREDICT SUM(orders.amount)", "graph": serialized_shop},
    )

    assert response.status_code == 502
    assert response.json()["error"] == "API_ERROR"


def test_predict_use_cache_does_not_span_requests(
    client, serialized_shop, default_config, monkeypatch
):
    """Test every request reaches the service even with useCache set."""
    default_config.set("client.api_key", "test-key")
    calls = []

    def fake_request(self, method, path, payload=None):
        calls.append(path)
        return {"predictions": [{"user_id": 1, "value": 1}]}

    monkeypatch.setattr(RFMApiClient, "request", fake_request)

    body = {"query": "PREDICT SUM(orders.amount)", "graph": serialized_shop, "useCache": True}
    first = client.post("/api/v1/predict", json=body)
    second = client.post("/api/v1/predict", json=body)

    assert first.status_code == second.status_code == 200
    assert calls == ["/predict", "/predict"]


def test_predict_use_cache_is_documented(client):
    schema = client.get("/openapi.json").json()
    field = schema["components"]["schemas"]["PredictRequest"]["properties"]["useCache"]

    assert "within this request only" in field["description"]
