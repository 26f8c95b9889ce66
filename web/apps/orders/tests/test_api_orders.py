"""API tests for the orders endpoints.

The view provider is patched to return a controller wired with an
in-memory repository, the real CPF validator and the payments stub, so
the full HTTP → controller → envelope path runs without MongoDB.
"""
import uuid

import pytest

from apps.orders.adapters import PaymentsStub
from apps.orders.controller import OrderController
from apps.orders.repository import order_document
from apps.orders.validators import CpfValidator, canonical_cpf

LIST_URL = "/api/orders/"
DETAIL_URL = "/api/orders/{cpf}/"
VALID_CPF = "26306359028"


class InMemoryOrdersRepository:
    """Dict-backed implementation of the orders repository port."""

    def __init__(self):
        self.docs = []

    async def list(self):
        return [dict(d) for d in self.docs]

    async def retrieve_by_cpf(self, cpf):
        return next((dict(d) for d in self.docs if d["cpf"] == canonical_cpf(cpf)), None)

    async def create(self, data, transaction_id=None):
        doc = {"id": uuid.uuid4().hex, **order_document(data, transaction_id)}
        self.docs.append(doc)
        return dict(doc)

    async def update(self, query, new_data):
        query = {k: canonical_cpf(v) if k == "cpf" else v for k, v in query.items()}
        changes = {k: canonical_cpf(v) if k == "cpf" else v for k, v in new_data.items() if k != "id"}
        for d in self.docs:
            if all(d.get(k) == v for k, v in query.items()):
                d.update(changes)
                return dict(d)
        return None

    async def delete(self, query):
        raise NotImplementedError


@pytest.fixture
def repository(monkeypatch):
    repo = InMemoryOrdersRepository()
    monkeypatch.setattr(
        "apps.orders.providers.get_order_controller",
        lambda: OrderController(repo, CpfValidator(), PaymentsStub()),
        raising=True,
    )
    return repo


def _create_payload(cpf=VALID_CPF, price=10):
    return {
        "orderData": {"email": "valid_email@email.com", "cpf": cpf},
        "paymentData": {
            "orderPrice": price,
            "orderReference": 4821,
            "cardNumber": "5448280000000007",
            "cvv": "235",
            "expirationMonth": "12",
            "expirationYear": "2099",
            "cardHolderName": "Fulano de Tal",
        },
    }


def test_ping(client):
    r = client.get("/api/orders/ping/")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_create_order_returns_201_and_persists_without_card_data(client, repository):
    r = client.post(LIST_URL, data=_create_payload(), content_type="application/json")
    assert r.status_code == 201
    body = r.json()
    assert body["cpf"] == VALID_CPF
    assert body["email"] == "valid_email@email.com"
    assert body["delivered"] is False
    uuid.UUID(body["transactionId"])
    assert "paymentData" not in repository.docs[0]
    assert "cardNumber" not in repository.docs[0]


def test_create_order_with_invalid_cpf_returns_400(client, repository):
    r = client.post(LIST_URL, data=_create_payload(cpf="12345612312"), content_type="application/json")
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid param: cpf"}
    assert repository.docs == []


def test_create_order_validation_error(client, repository):
    payload = _create_payload()
    payload["paymentData"]["cardNumber"] = "not-a-card"
    r = client.post(LIST_URL, data=payload, content_type="application/json")
    assert r.status_code == 400
    assert "detail" in r.json()


def test_create_order_payment_failure_returns_500(client, monkeypatch):
    """Returns 500 when the payments port raises (gateway failure)."""
    from apps.orders.domain import PaymentError

    class DeclinedPayments:
        async def pay(self, payment_data):
            raise PaymentError("PAYMENT_DECLINED")

    repo = InMemoryOrdersRepository()
    monkeypatch.setattr(
        "apps.orders.providers.get_order_controller",
        lambda: OrderController(repo, CpfValidator(), DeclinedPayments()),
        raising=True,
    )
    r = client.post(LIST_URL, data=_create_payload(), content_type="application/json")
    assert r.status_code == 500
    assert r.json() == {"message": "PAYMENT_DECLINED"}
    assert repo.docs == []


def test_retrieve_order_returns_200(client, repository):
    client.post(LIST_URL, data=_create_payload(), content_type="application/json")
    r = client.get(DETAIL_URL.format(cpf=VALID_CPF))
    assert r.status_code == 200
    assert r.json()["cpf"] == VALID_CPF


def test_retrieve_order_not_found_returns_400(client, repository):
    r = client.get(DETAIL_URL.format(cpf=VALID_CPF))
    assert r.status_code == 400
    assert r.json() == {"message": "No orders were found"}


def test_retrieve_order_invalid_cpf_returns_400(client, repository):
    r = client.get(DETAIL_URL.format(cpf="11111111111"))
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid param: cpf"}


def test_update_order_marks_delivered(client, repository):
    client.post(LIST_URL, data=_create_payload(), content_type="application/json")
    r = client.patch(DETAIL_URL.format(cpf=VALID_CPF), data={"delivered": True}, content_type="application/json")
    assert r.status_code == 200
    assert r.json()["delivered"] is True
    assert repository.docs[0]["delivered"] is True


def test_update_unknown_order_returns_400(client, repository):
    r = client.patch(DETAIL_URL.format(cpf=VALID_CPF), data={"delivered": True}, content_type="application/json")
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid param"}


def test_update_rejects_unknown_fields(client, repository):
    r = client.patch(DETAIL_URL.format(cpf=VALID_CPF), data={"transactionId": "x"}, content_type="application/json")
    assert r.status_code == 400
    assert "detail" in r.json()


def test_list_orders(client, repository):
    client.post(LIST_URL, data=_create_payload(), content_type="application/json")
    r = client.get(LIST_URL)
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 1
    assert body["results"][0]["cpf"] == VALID_CPF


def test_response_carries_request_id(client, repository):
    r = client.get(DETAIL_URL.format(cpf=VALID_CPF), HTTP_X_REQUEST_ID="rid-42")
    assert r.headers["X-Request-ID"] == "rid-42"


def test_oversized_payload_returns_413(client, settings, repository):
    settings.API_MAX_BYTES = 10
    r = client.post(LIST_URL, data=_create_payload(), content_type="application/json")
    assert r.status_code == 413
    assert r.json() == {"detail": "PAYLOAD_TOO_LARGE"}


def test_order_created_with_punctuated_cpf_is_found_by_digits(client, repository):
    r = client.post(LIST_URL, data=_create_payload(cpf="263.063.590-28"), content_type="application/json")
    assert r.status_code == 201
    assert r.json()["cpf"] == VALID_CPF

    r = client.get(DETAIL_URL.format(cpf=VALID_CPF))
    assert r.status_code == 200
    assert r.json()["cpf"] == VALID_CPF

    r = client.patch(DETAIL_URL.format(cpf=VALID_CPF), data={"delivered": True}, content_type="application/json")
    assert r.status_code == 200
    assert repository.docs[0]["delivered"] is True


def test_create_order_ignores_delivered_flag(client, repository):
    payload = _create_payload()
    payload["orderData"]["delivered"] = True
    r = client.post(LIST_URL, data=payload, content_type="application/json")
    assert r.status_code == 201
    assert r.json()["delivered"] is False
    assert repository.docs[0]["delivered"] is False
