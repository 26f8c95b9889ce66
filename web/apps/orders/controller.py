"""Order controller: validate, delegate, and map results to responses.

Each operation is a single linear pipeline. Business rule violations
become 400 responses with a short message; anything raised by a
collaborator becomes a 500 response. Nothing is retried.
"""

import logging
from typing import Any, Mapping

from .domain import CpfValidatorPort, OrdersRepositoryPort, PaymentsPort
from .responses import (
    HttpResponse,
    http_bad_request,
    http_created,
    http_ok,
    http_server_error,
)

logger = logging.getLogger("orders")

INVALID_CPF = {"message": "Invalid param: cpf"}
NOT_FOUND = {"message": "No orders were found"}
INVALID_PARAM = {"message": "Invalid param"}

# Fields that identify the order an update request targets, by priority.
UPDATE_KEYS = ("id", "cpf")


class OrderController:
    """Orchestrates order requests over the injected ports.

    Args:
        repository: Orders persistence.
        cpf_validator: CPF validation capability.
        payments: Card payment gateway.
    """

    def __init__(
        self,
        repository: OrdersRepositoryPort,
        cpf_validator: CpfValidatorPort,
        payments: PaymentsPort,
    ):
        self.repository = repository
        self.cpf_validator = cpf_validator
        self.payments = payments

    async def retrieve_order(self, request: Mapping[str, Any]) -> HttpResponse:
        """Load the first order for ``request["cpf"]``.

        Returns:
            200 with the order, 400 for an invalid cpf or when no order
            exists, 500 when a collaborator raises.
        """
        try:
            cpf = request.get("cpf")
            if not self.cpf_validator.validate(cpf):
                return http_bad_request(INVALID_CPF)

            order = await self.repository.retrieve_by_cpf(cpf)
            if not order:
                return http_bad_request(NOT_FOUND)
            return http_ok(order)
        except Exception as e:
            logger.exception("retrieve_order failed")
            return http_server_error(e)

    async def create_order(self, request: Mapping[str, Any]) -> HttpResponse:
        """Charge the card and persist a new order.

        ``request`` carries ``orderData`` and ``paymentData``. The whole
        request is handed to the repository, which keeps the order fields
        and the transaction id only.

        Returns:
            201 with the created order, 400 for an invalid cpf, 500 when
            the gateway or the repository raises.
        """
        transaction_id = None
        try:
            order_data = request.get("orderData")
            if not isinstance(order_data, Mapping):
                return http_bad_request(INVALID_CPF)
            if not self.cpf_validator.validate(order_data.get("cpf")):
                return http_bad_request(INVALID_CPF)

            transaction_id = await self.payments.pay(request.get("paymentData"))

            order = await self.repository.create(request, transaction_id=transaction_id)
            logger.info("order created", extra={"order_id": order.get("id"), "transaction_id": transaction_id})
            return http_created(order)
        except Exception as e:
            if transaction_id is not None:
                # Charge went through but the order was not stored; nothing
                # reverses the charge, so leave a trail for reconciliation.
                logger.exception("order not persisted after charge", extra={"transaction_id": transaction_id})
            else:
                logger.exception("create_order failed")
            return http_server_error(e)

    async def update_order(self, request: Mapping[str, Any]) -> HttpResponse:
        """Apply ``request`` fields to the order it identifies.

        The target is chosen by the first identifying field present in the
        request (``id``, then ``cpf``). The cpf is not re-validated and the
        caller is not authorized against the target order.

        Returns:
            200 with the updated order, 400 when no order matched, 500 when
            the repository raises.
        """
        try:
            query = next(({k: request[k]} for k in UPDATE_KEYS if k in request), {})
            order = await self.repository.update(query, request)
            if not order:
                return http_bad_request(INVALID_PARAM)
            return http_ok(order)
        except Exception as e:
            logger.exception("update_order failed")
            return http_server_error(e)

    async def list_orders(self) -> HttpResponse:
        """Return every stored order as ``{count, results}``."""
        try:
            orders = await self.repository.list()
            return http_ok({"count": len(orders), "results": orders})
        except Exception as e:
            logger.exception("list_orders failed")
            return http_server_error(e)
