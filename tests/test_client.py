"""Tests for the prediction client."""

from unittest.mock import MagicMock

import pytest
import requests

from kumorfm.client import KumoRFM, PredictionResult, RFMApiClient, RFMConfig
from kumorfm.core import APIError, LocalGraph, ValidationError
from kumorfm.query import PQLBuilder


def _response(status=200, body=None):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.text = str(body)
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.request.return_value = _response(
        body={"predictions": [{"user_id": 1, "value": 0.7}], "metadata": {"rowCount": 1}}
    )
    return session


@pytest.fixture
def model(shop_rows, session):
    config = RFMConfig(api_key="secret", base_url="https://rfm.example.com/")
    client = RFMApiClient(config, session=session)
    return KumoRFM(LocalGraph.from_data(shop_rows), client=client)


def test_config_from_env(default_config, monkeypatch):
    monkeypatch.setenv("KUMO_API_KEY", "env-key")
    config = RFMConfig.from_config(default_config)

    assert config.api_key == "env-key"
    assert config.base_url == "https://api.kumorfm.ai"
    assert config.timeout == 30.0


def test_config_prefers_config_key(default_config, monkeypatch):
    monkeypatch.setenv("KUMO_API_KEY", "env-key")
    default_config.set("client.api_key", "file-key")

    assert RFMConfig.from_config(default_config).api_key == "file-key"


def test_config_without_key_raises(default_config):
    with pytest.raises(ValueError, match="No API key"):
        RFMConfig.from_config(default_config)


def test_request_sends_bearer_token(session):
    client = RFMApiClient(RFMConfig(api_key="secret", base_url="https://rfm.example.com/"), session)
    client.request("POST", "/predict", {"query": "PREDICT x"})

    args, kwargs = session.request.call_args
    assert args == ("POST", "https://rfm.example.com/predict")
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["json"] == {"query": "PREDICT x"}
    assert kwargs["timeout"] == 30.0


def test_request_error_status_raises(session):
    session.request.return_value = _response(status=401, body={"error": "unauthorized"})
    client = RFMApiClient(RFMConfig(api_key="bad"), session)

    with pytest.raises(APIError) as exc_info:
        client.request("POST", "/predict")

    assert exc_info.value.status_code == 401


def test_request_transport_error_raises(session):
    session.request.side_effect = requests.ConnectionError("refused")
    client = RFMApiClient(RFMConfig(api_key="secret"), session)

    with pytest.raises(APIError, match="refused"):
        client.request("GET", "/health")


def test_request_invalid_json_raises(session):
    response = _response(body=None)
    response.json.side_effect = ValueError("not json")
    session.request.return_value = response
    client = RFMApiClient(RFMConfig(api_key="secret"), session)

    with pytest.raises(APIError, match="Invalid JSON"):
        client.request("GET", "/health")


def test_predict_with_builder(model, session):
    query = PQLBuilder().predict("SUM(orders.amount)").for_("user_id")
    result = model.predict(query)

    assert isinstance(result, PredictionResult)
    assert result.query == "PREDICT SUM(orders.amount) FOR user_id"
    assert result.row_count == 1
    assert result.predictions == [{"user_id": 1, "value": 0.7}]

    payload = session.request.call_args.kwargs["json"]
    assert payload["query"] == result.query
    assert payload["graph"]["links"] == [
        {"srcTable": "orders", "fkey": "user_id", "dstTable": "users"}
    ]


def test_predict_builder_without_target_raises(model, session):
    with pytest.raises(ValidationError):
        model.predict(PQLBuilder().for_("user_id"))

    session.request.assert_not_called()


def test_predict_cache(model, session):
    """Test cached results are reused until the graph changes."""
    first = model.predict("PREDICT x", use_cache=True)
    second = model.predict("PREDICT x", use_cache=True)

    assert first is second
    assert session.request.call_count == 1

    model.update_graph(LocalGraph([]))
    model.predict("PREDICT x", use_cache=True)
    assert session.request.call_count == 2


def test_batch_predict_in_order(model):
    results = model.batch_predict(["PREDICT a", "PREDICT b"])

    assert [r.query for r in results] == ["PREDICT a", "PREDICT b"]


def test_prediction_result_to_dict():
    result = PredictionResult(query="PREDICT x", predictions=[], row_count=0, model_version="v2")

    assert result.to_dict()["metadata"] == {
        "executionTime": 0.0,
        "rowCount": 0,
        "modelVersion": "v2",
    }


def test_execute_query_posts_serialized_graph(shop_rows, session):
    client = RFMApiClient(RFMConfig(api_key="secret"), session)
    body = client.execute_query("PREDICT x", LocalGraph.from_data(shop_rows))

    assert body["metadata"] == {"rowCount": 1}
    args, kwargs = session.request.call_args
    assert args == ("POST", "https://api.kumorfm.ai/predict")
    assert kwargs["json"]["query"] == "PREDICT x"
    assert [t["name"] for t in kwargs["json"]["graph"]["tables"]] == ["users", "orders"]


def test_validate_graph_on_service(model, session):
    """Test the service's validation body is returned as a ValidationResult."""
    session.request.return_value = _response(
        body={
            "valid": False,
            "errors": [{"type": "INVALID_LINK", "message": "bad", "table": "users"}],
            "warnings": [],
        }
    )

    result = model.validate_graph()

    assert result.valid is False
    assert result.error_types == ["INVALID_LINK"]
    assert result.errors[0].table == "users"
    args, kwargs = session.request.call_args
    assert args == ("POST", "https://rfm.example.com/validate")
    assert set(kwargs["json"]) == {"graph"}
