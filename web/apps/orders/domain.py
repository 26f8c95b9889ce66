"""Domain types, ports and errors for orders.

This module holds the transient payment DTO, the protocol definitions
(ports) for the collaborators the order controller depends on (CPF
validation, payments and persistence) and the domain exceptions raised
by their implementations.
"""

from dataclasses import dataclass, asdict
from typing import Any, Mapping, Optional, Protocol


class PaymentError(Exception):
    """Raised by payment adapters when a charge cannot be completed.

    The exception message is a short error code (for example
    ``PAYMENT_DECLINED``) so callers can map it without parsing text.
    """

    def __init__(self, code: str, detail: str | None = None):
        super().__init__(code)
        self.code = code
        self.detail = detail


# ---- DTOs ----
@dataclass(frozen=True)
class PaymentData:
    """Card payment request forwarded to the payment gateway.

    Never persisted by the orders service.

    Attributes:
        order_price: Order total in the major currency unit.
        order_reference: Caller-side reference for the order.
        card_number: Card PAN, digits only.
        cvv: Card verification value.
        expiration_month: Two-digit month, as sent by the client.
        expiration_year: Four-digit year, as sent by the client.
        card_holder_name: Name printed on the card.
    """

    order_price: float
    order_reference: Any
    card_number: str
    cvv: str
    expiration_month: str
    expiration_year: str
    card_holder_name: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PaymentData":
        """Build from the camelCase wire mapping."""
        return cls(
            order_price=data.get("orderPrice", 0),
            order_reference=data.get("orderReference"),
            card_number=str(data.get("cardNumber", "")),
            cvv=str(data.get("cvv", "")),
            expiration_month=str(data.get("expirationMonth", "")),
            expiration_year=str(data.get("expirationYear", "")),
            card_holder_name=data.get("cardHolderName", ""),
        )

    def to_wire(self) -> dict:
        """Return the camelCase mapping expected by the payment gateway."""
        d = asdict(self)
        return {
            "orderPrice": d["order_price"],
            "orderReference": d["order_reference"],
            "cardNumber": d["card_number"],
            "cvv": d["cvv"],
            "expirationMonth": d["expiration_month"],
            "expirationYear": d["expiration_year"],
            "cardHolderName": d["card_holder_name"],
        }


# ---- Ports (DIP) ----
class CpfValidatorPort(Protocol):
    """Port describing CPF validation used by the controller."""

    def validate(self, cpf: Any) -> bool:
        """Return True when ``cpf`` is a well-formed CPF.

        Raises:
            NotImplementedError: If the method is not implemented by the
                concrete class.
        """
        raise NotImplementedError()


class PaymentsPort(Protocol):
    """Port describing the card payment gateway.

    Implementers submit the payment and return the gateway transaction
    identifier, raising ``PaymentError`` when the charge fails.
    """

    async def pay(self, payment_data: Mapping[str, Any]) -> str:
        """Charge the card described by ``payment_data``.

        Args:
            payment_data: PaymentData wire mapping (camelCase keys).

        Returns:
            The transaction id assigned by the gateway.

        Raises:
            PaymentError: When the gateway declines or cannot be reached.
        """
        raise NotImplementedError()


class OrdersRepositoryPort(Protocol):
    """Port describing order persistence.

    Lookups return ``None`` when nothing matches so callers must handle
    absence explicitly.
    """

    async def list(self) -> list[dict]:
        raise NotImplementedError()

    async def retrieve_by_cpf(self, cpf: str) -> Optional[dict]:
        raise NotImplementedError()

    async def create(self, data: Mapping[str, Any], transaction_id: str | None = None) -> dict:
        raise NotImplementedError()

    async def update(self, query: Mapping[str, Any], new_data: Mapping[str, Any]) -> Optional[dict]:
        raise NotImplementedError()

    async def delete(self, query: Mapping[str, Any]) -> bool:
        raise NotImplementedError()
