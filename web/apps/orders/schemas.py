"""Pydantic schemas for orders.

This module exposes the request schemas used by the orders API views to
check payload shape before the controller runs. Business validation (the
CPF check digits) stays in the controller.
"""

import re
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


DIGITS_RE = re.compile(r"^\d+$")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderDataIn(_CamelModel):
    """Order fields supplied by the client on creation.

    Attributes:
        cpf: Customer CPF, punctuated or digits only.
        email: Customer e-mail address.

    A ``delivered`` flag sent on creation is ignored; new orders start
    undelivered.
    """

    cpf: str = Field(min_length=11, max_length=14)
    email: EmailStr


class PaymentDataIn(_CamelModel):
    """Card payment data forwarded to the payments gateway.

    Attributes:
        order_price: Positive order total in the major currency unit.
        order_reference: Client reference for the order.
        card_number: Card number, 13-19 digits.
        cvv: 3 or 4 digit verification code.
        expiration_month: Month, 1-12, as string.
        expiration_year: Four-digit year, as string.
        card_holder_name: Name printed on the card.
    """

    order_price: float = Field(gt=0)
    order_reference: Union[int, str]
    card_number: str = Field(min_length=13, max_length=19)
    cvv: str = Field(min_length=3, max_length=4)
    expiration_month: str = Field(min_length=1, max_length=2)
    expiration_year: str = Field(min_length=4, max_length=4)
    card_holder_name: str = Field(min_length=1, max_length=100)

    @field_validator("card_number", "cvv", "expiration_month", "expiration_year", mode="before")
    @classmethod
    def validate_digits(cls, v):
        """Accept ints, normalize to string, and require digits only.

        Raises:
            ValueError: When the value contains non-digit characters.
        """
        v2 = str(v).strip()
        if not DIGITS_RE.match(v2):
            raise ValueError("Must contain digits only")
        return v2


class CreateOrderDTO(_CamelModel):
    """Schema for creating an order: ``{orderData, paymentData}``."""

    order_data: OrderDataIn
    payment_data: PaymentDataIn


class UpdateOrderDTO(_CamelModel):
    """Schema for a partial order update.

    Only the fields present in the payload are applied.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    email: Optional[EmailStr] = None
    delivered: Optional[bool] = None
