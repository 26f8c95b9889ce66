"""API tests for the payments gateway charge endpoint.

The service runs against a temporary SQLite database (see conftest.py);
``TestClient`` is used as a context manager so the startup hook creates
the tables.
"""
import uuid
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from main import app, is_expired, luhn_ok, to_cents
from repo import PaymentsRepo

PAYLOAD = {
    "orderPrice": 10.5,
    "orderReference": 4821,
    "cardNumber": "5448280000000007",
    "cvv": "235",
    "expirationMonth": "12",
    "expirationYear": "2099",
    "cardHolderName": "Fulano de Tal",
}


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_charge_approved_persists_transaction(client):
    r = client.post("/charge", json=PAYLOAD)
    assert r.status_code == 200
    body = r.json()
    assert body["paid"] is True
    tx = PaymentsRepo().get(uuid.UUID(body["transaction_id"]))
    assert tx is not None
    assert tx.amount_cents == 1050
    assert tx.card_last4 == "0007"
    assert tx.order_reference == "4821"
    assert tx.internal_id >= 1


def test_charge_internal_ids_increase(client):
    first = client.post("/charge", json=PAYLOAD).json()["transaction_id"]
    second = client.post("/charge", json=PAYLOAD).json()["transaction_id"]
    repo = PaymentsRepo()
    assert repo.get(uuid.UUID(second)).internal_id == repo.get(uuid.UUID(first)).internal_id + 1


def test_charge_declines_card_failing_luhn(client):
    r = client.post("/charge", json={**PAYLOAD, "cardNumber": "5448280000000008"})
    assert r.status_code == 402
    assert r.json()["detail"] == "CARD_DECLINED"


def test_charge_declines_expired_card(client):
    r = client.post("/charge", json={**PAYLOAD, "expirationYear": "2020"})
    assert r.status_code == 402
    assert r.json()["detail"] == "CARD_EXPIRED"


@pytest.mark.parametrize(
    "field,value",
    [
        ("orderPrice", 0),
        ("cardNumber", "1234"),
        ("cvv", "12a"),
        ("expirationMonth", "13"),
        ("expirationYear", "20"),
        ("cardHolderName", ""),
    ],
)
def test_charge_rejects_malformed_payload(client, field, value):
    r = client.post("/charge", json={**PAYLOAD, field: value})
    assert r.status_code == 422


def test_charge_echoes_request_id(client):
    r = client.post("/charge", json=PAYLOAD, headers={"X-Request-ID": "rid-7"})
    assert r.headers["X-Request-ID"] == "rid-7"


def test_luhn():
    assert luhn_ok("5448280000000007")
    assert luhn_ok("4111111111111111")
    assert not luhn_ok("4111111111111112")


def test_is_expired_uses_end_of_month():
    now = datetime(2026, 10, 18)
    assert is_expired(9, 2026, now)
    assert not is_expired(10, 2026, now)
    assert not is_expired(1, 2027, now)


def test_to_cents_rounds_half_up():
    from decimal import Decimal
    assert to_cents(Decimal("10.005")) == 1001
    assert to_cents(Decimal("10")) == 1000
