"""Payments gateway API built with FastAPI.

This module exposes endpoints to check service health and to charge a
card. Payload shape is validated with Pydantic models; card checks
(Luhn checksum, expiration) decide between approval and a 402 decline.
Approved charges are persisted through the SQLAlchemy-backed repository
in ``repo.PaymentsRepo``.
"""

import uuid
import logging
import time
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field, constr
from pydantic.alias_generators import to_camel
from pythonjsonlogger import jsonlogger
from sqlalchemy import text

from repo import PaymentsRepo, engine, init_db


app = FastAPI(title="Payments Service")

CardNumber = constr(pattern=r"^\d{13,19}$")
Cvv = constr(pattern=r"^\d{3,4}$")
Year = constr(pattern=r"^\d{4}$")

logger = logging.getLogger("payments")
if not logger.handlers:
    h = logging.StreamHandler()
    h.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"))
    logger.addHandler(h)
    logger.setLevel(logging.INFO)


@app.on_event("startup")
def _startup_db():
    # short busy-wait until the DB accepts connections
    deadline = time.time() + 30  # 30s
    while True:
        try:
            with engine.connect() as conn:
                conn.execute(text("select 1"))
            break
        except Exception:
            if time.time() > deadline:
                raise
            time.sleep(1)
    init_db()


class ChargeRequest(BaseModel):
    """Request body for the charge endpoint (camelCase on the wire).

    Attributes:
        order_price: Positive order total in the major currency unit.
        order_reference: Caller reference for the order.
        card_number: 13-19 digit card number.
        cvv: 3-4 digit verification code.
        expiration_month: 1-12.
        expiration_year: Four-digit year.
        card_holder_name: Name printed on the card.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    order_price: Decimal = Field(gt=0)
    order_reference: Union[int, str]
    card_number: CardNumber
    cvv: Cvv
    expiration_month: int = Field(ge=1, le=12)
    expiration_year: Year
    card_holder_name: str = Field(min_length=1, max_length=100)


class ChargeResponse(BaseModel):
    """Response body for the charge endpoint.

    Attributes:
        paid: Whether the payment was approved.
        transaction_id: UUID of the created transaction record.
    """
    paid: bool
    transaction_id: uuid.UUID


def luhn_ok(number: str) -> bool:
    """Return True when ``number`` passes the Luhn checksum."""
    total = 0
    for i, ch in enumerate(reversed(number)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def is_expired(month: int, year: int, now: datetime | None = None) -> bool:
    """A card is valid through the last day of its expiration month."""
    now = now or datetime.now(timezone.utc)
    return (year, month) < (now.year, now.month)


def to_cents(price: Decimal) -> int:
    return int((price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@app.get("/health")
def health():
    """Liveness/health probe endpoint.

    Returns:
        dict: A small JSON payload indicating service health.
    """
    return {"ok": True}


@app.post("/charge", response_model=ChargeResponse)
def charge(req: ChargeRequest):
    """Charge a card.

    Args:
        req: Validated card payment request.

    Returns:
        ChargeResponse: Object containing ``paid`` and ``transaction_id``.

    Raises:
        HTTPException: 402 with ``CARD_DECLINED`` when the card number
            fails the Luhn check or ``CARD_EXPIRED`` when the card is past
            its expiration month; 500 when the transaction is not stored.
    """
    if not luhn_ok(req.card_number):
        raise HTTPException(status_code=402, detail="CARD_DECLINED")
    if is_expired(req.expiration_month, int(req.expiration_year)):
        raise HTTPException(status_code=402, detail="CARD_EXPIRED")

    tx_id = PaymentsRepo().create_tx(
        order_reference=str(req.order_reference),
        amount_cents=to_cents(req.order_price),
        card_last4=req.card_number[-4:],
        paid=True,
    )
    if not tx_id:
        raise HTTPException(status_code=500, detail="TX_NOT_CREATED")
    logger.info("charge approved", extra={"transaction_id": str(tx_id), "order_reference": str(req.order_reference)})
    return ChargeResponse(paid=True, transaction_id=tx_id)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = rid
    try:
        response = await call_next(request)
    finally:
        logger.info("request handled", extra={"request_id": rid, "path": request.url.path, "method": request.method})
    response.headers["X-Request-ID"] = rid
    return response
