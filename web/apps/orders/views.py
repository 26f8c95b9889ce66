"""HTTP views for the orders app.

This module contains DRF API views used by the orders service. Views are
kept intentionally small: they validate payload shape (via Pydantic),
build a plain request mapping, run the async ``OrderController`` and
return its envelope as a DRF response.

The views obtain a configured controller from ``get_order_controller()``
which wires the HTTP payments client (``HttpPaymentsClient``) or the
in-process stub (``PaymentsStub``) depending on runtime settings. This
allows tests and local development to swap implementations without
changing view logic.
"""
from asgiref.sync import async_to_sync
from pydantic import ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from . import providers
from .responses import HttpResponse
from .schemas import CreateOrderDTO, UpdateOrderDTO


def _render(envelope: HttpResponse) -> Response:
    return Response(envelope.body, status=envelope.status_code)


class OrdersPingView(APIView):
    """Simple health-check endpoint for the orders module.

    This view returns a minimal JSON payload used by liveness/health
    checks and by automated smoke-tests.
    """

    def get(self, request):
        """Handle GET requests for the health endpoint.

        Returns:
            Response: A DRF Response with JSON {"ok": True} and HTTP 200.
        """
        return Response({"ok": True})


class OrdersCollectionView(APIView):
    """List orders, or create one by charging the card and persisting it."""
    throttle_classes = [ScopedRateThrottle]

    def get_throttles(self):
        # DRF evaluates throttles in initial(), before get/post
        self.throttle_scope = "orders_list" if self.request.method == "GET" else "orders_create"
        return [throttle() for throttle in self.throttle_classes]

    def get(self, request):
        controller = providers.get_order_controller()
        return _render(async_to_sync(controller.list_orders)())

    def post(self, request):
        """Create a new order.

        Args:
            request (Request): DRF request with a JSON body
                ``{orderData, paymentData}``.

        Returns:
            Response: One of the following responses.
            - 201 with the stored order when payment and persistence succeed.
            - 400 with {detail} when the payload shape is invalid.
            - 400 with {message: "Invalid param: cpf"} for an invalid cpf.
            - 500 with {message} when the gateway or the database fails.
        """
        try:
            dto = CreateOrderDTO.model_validate(request.data)
        except ValidationError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        payload = dto.model_dump(by_alias=True)
        controller = providers.get_order_controller()
        return _render(async_to_sync(controller.create_order)(payload))


class OrderDetailView(APIView):
    """Retrieve or update the order of a given CPF."""
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "orders_detail"

    def get(self, request, cpf: str):
        controller = providers.get_order_controller()
        return _render(async_to_sync(controller.retrieve_order)({"cpf": cpf}))

    def patch(self, request, cpf: str):
        """Apply a partial update (``email``, ``delivered``) to the order.

        Returns:
            Response: 200 with the updated order, 400 when the payload is
            invalid or no order matched, 500 when the database fails.
        """
        try:
            dto = UpdateOrderDTO.model_validate(request.data)
        except ValidationError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        changes = dto.model_dump(by_alias=True, exclude_none=True)
        controller = providers.get_order_controller()
        return _render(async_to_sync(controller.update_order)({"cpf": cpf, **changes}))
