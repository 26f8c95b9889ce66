"""In-process stub adapters for the orders domain ports.

These stubs implement ``PaymentsPort`` without any network calls. They
are intended for unit tests and local development where deterministic
behavior is useful and the payments gateway is not running.
"""

import uuid
from typing import Any, Mapping

from .domain import PaymentData, PaymentError, PaymentsPort


class PaymentsStub(PaymentsPort):
    """Stub implementation of ``PaymentsPort``.

    Approves charges with a positive order price and returns a generated
    UUID as the transaction id. Non-positive prices are declined.
    """

    async def pay(self, payment_data: Mapping[str, Any]) -> str:
        """Charge a mock payment.

        Args:
            payment_data: PaymentData wire mapping.

        Returns:
            str: A random UUID string for approved payments.

        Raises:
            PaymentError: ``PAYMENT_DECLINED`` when the price is not positive.
        """
        data = PaymentData.from_mapping(payment_data or {})
        try:
            price = float(data.order_price)
        except (TypeError, ValueError):
            price = 0.0
        if price <= 0:
            raise PaymentError("PAYMENT_DECLINED")
        return str(uuid.uuid4())  # Demo: generate a valid UUID
