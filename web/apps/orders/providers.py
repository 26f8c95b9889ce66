"""Provider helpers for wiring OrderController with its ports.

This module exposes a small factory function `get_order_controller` that
returns a configured `OrderController` instance. When
`settings.USE_HTTP_ADAPTERS` is truthy the controller charges cards
through the HTTP payments gateway; otherwise it uses the in-process
payment stub suitable for tests and local development.
"""

from django.conf import settings

from .adapters import PaymentsStub
from .controller import OrderController
from .http_adapters import HttpPaymentsClient
from .repository import OrdersMongoRepository
from .validators import CpfValidator


def get_order_controller() -> OrderController:
    """Return a configured OrderController instance.

    Returns:
        OrderController: A controller wired with the Mongo repository, the
        CPF validator and either the HTTP or the stub payments port.
    """
    if getattr(settings, "USE_HTTP_ADAPTERS", True):
        payments = HttpPaymentsClient()
    else:
        payments = PaymentsStub()

    return OrderController(
        repository=OrdersMongoRepository(),
        cpf_validator=CpfValidator(),
        payments=payments,
    )
