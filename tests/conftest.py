"""Shared fixtures."""

import pytest

from kumorfm.utils.config import Config, set_config


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Give every test a fresh default config and no ambient API key."""
    monkeypatch.delenv("KUMO_API_KEY", raising=False)
    monkeypatch.delenv("KUMORFM_CONFIG", raising=False)
    config = Config()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def shop_rows():
    """Users and orders rows from the quickstart."""
    return {
        "users": [{"user_id": 1}, {"user_id": 2}],
        "orders": [
            {"order_id": 1, "user_id": 1, "amount": 10},
            {"order_id": 2, "user_id": 2, "amount": 20},
        ],
    }
