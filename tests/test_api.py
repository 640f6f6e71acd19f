"""
HTTP API tests against a test engine.
"""
import pytest
from fastapi.testclient import TestClient

from credit_pricing import CreditPricing
from credit_pricing.api import state
from credit_pricing.api.main import app
from conftest import DYNAMIC_PRICE_CENTS, FEATURE_SLUG, TEST_CREDITS


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(state, "engine", CreditPricing(TEST_CREDITS))
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"
    assert response.json()["target"] == "current"


def test_list_features(client):
    assert client.get("/features").json() == {"features": [FEATURE_SLUG]}


def test_get_definition(client):
    response = client.get(f"/features/{FEATURE_SLUG}/definition")

    assert response.status_code == 200
    body = response.json()
    assert body["version"] == 1
    assert body["first_discount_price_cents"] == 149
    assert body["valid_from"].startswith("2020-01-01")


def test_quote(client):
    response = client.post("/quote", json={
        "feature_slug": FEATURE_SLUG,
        "held_quantity": 0,
        "purchase_quantity": 1000,
        "dynamic_price_cents": DYNAMIC_PRICE_CENTS,
    })

    assert response.status_code == 200
    body = response.json()
    assert body["unit_price_cents"] == 147
    assert body["total_price_cents"] == 147_000
    assert body["discount_percent"] == 2
    assert body["total_savings_cents"] == 3000
    assert body["trace"][0]["step"] == "Definition"


def test_quote_unknown_feature(client):
    response = client.post("/quote", json={"feature_slug": "unknown:feature", "purchase_quantity": 1})

    assert response.status_code == 404
    assert response.json()["detail"] == "Requested feature not allowed for credit usage"


def test_quote_invalid_amount(client):
    response = client.post("/quote", json={"feature_slug": FEATURE_SLUG, "purchase_quantity": 0})

    assert response.status_code == 422
    assert response.json()["detail"] == "Credit purchase amount must be greater than 0"


def test_quote_beyond_maximum_credits(client):
    response = client.post("/quote", json={"feature_slug": FEATURE_SLUG, "purchase_quantity": 10 ** 18})

    assert response.status_code == 422
    assert "maximum supported amount of credits" in response.json()["detail"]


def test_quantity_range(client):
    response = client.get(f"/features/{FEATURE_SLUG}/range", params={"unit_price_cents": 149})

    assert response.status_code == 200
    assert response.json() == {
        "feature_slug": FEATURE_SLUG,
        "unit_price_cents": 149,
        "from": None,
        "to": 250,
    }


def test_quantity_range_too_expensive(client):
    response = client.get(f"/features/{FEATURE_SLUG}/range", params={"unit_price_cents": 500})
    assert response.status_code == 422


def test_schedule(client):
    response = client.get(
        f"/features/{FEATURE_SLUG}/schedule",
        params=[("quantities", 1), ("quantities", 1000), ("quantities", 10 ** 18)],
    )

    assert response.status_code == 200
    body = response.json()
    assert [row["unit_price_cents"] for row in body["rows"]] == [149, 147]
    assert body["skipped"] == [10 ** 18]
