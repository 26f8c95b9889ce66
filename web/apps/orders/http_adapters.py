"""HTTP adapter client for the payments gateway.

This module implements the concrete ``PaymentsPort`` using ``httpx``. It
adds request correlation by propagating ``X-Request-ID`` from the
ContextVar set by the gateway middleware. Failures are surfaced
immediately as ``PaymentError``; there is no retry policy.
"""

import logging
from typing import Any, Mapping, Optional

import httpx
from django.conf import settings
from django.utils.module_loading import import_string

from .domain import PaymentData, PaymentError, PaymentsPort

REQUEST_ID_CTX = import_string("gateway.middleware.REQUEST_ID_CTX")

logger = logging.getLogger("orders")


def _request_headers(extra: Optional[dict] = None) -> dict:
    """Build base headers including X-Request-ID and any extras.

    Args:
        extra: Optional dict of additional headers to include.

    Returns:
        dict: Final headers dictionary for the outgoing request.
    """
    headers: dict[str, str] = {}
    rid = REQUEST_ID_CTX.get()
    if rid and rid != "-":
        headers["X-Request-ID"] = rid
    if extra:
        headers.update(extra)
    return headers


def _field(resp: httpx.Response, name: str) -> str | None:
    """Return string field ``name`` of a JSON object body, else None."""
    try:
        body = resp.json()
    except ValueError:
        return None
    value = body.get(name) if isinstance(body, dict) else None
    return value if isinstance(value, str) else None


class HttpPaymentsClient(PaymentsPort):
    """HTTP client for the payments gateway."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.PAYMENTS_BASE_URL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECS

    async def pay(self, payment_data: Mapping[str, Any]) -> str:
        """Submit a card payment and return the gateway transaction id.

        Response mapping:
        - 200 → ``transaction_id`` from the body
        - 402 → ``PAYMENT_DECLINED``
        - 422 → ``INVALID_PAYMENT_DATA``
        - any other status → ``PAYMENT_GATEWAY_ERROR``

        Args:
            payment_data: PaymentData wire mapping.

        Returns:
            str: Transaction id assigned by the gateway.

        Raises:
            PaymentError: On decline, gateway error, transport error or a
                response without a transaction id.
        """
        payload = PaymentData.from_mapping(payment_data or {}).to_wire()
        headers = _request_headers()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(f"{self.base_url}/charge", json=payload, headers=headers or None)
        except httpx.RequestError as e:
            logger.warning("payments gateway unreachable", extra={"error": str(e)})
            raise PaymentError("PAYMENT_GATEWAY_UNAVAILABLE") from e

        if resp.status_code == 200:
            tx = _field(resp, "transaction_id")
            if not tx:
                raise PaymentError("MISSING_TRANSACTION_ID")
            return str(tx)
        if resp.status_code == 402:
            raise PaymentError("PAYMENT_DECLINED", _field(resp, "detail"))
        if resp.status_code == 422:
            raise PaymentError("INVALID_PAYMENT_DATA", _field(resp, "detail"))

        logger.warning("payments gateway error", extra={"status_code": resp.status_code})
        raise PaymentError("PAYMENT_GATEWAY_ERROR")
