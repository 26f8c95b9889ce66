"""Framework-agnostic response envelopes returned by the order controller.

Views translate an ``HttpResponse`` into whatever the web framework
expects; the controller itself never imports framework types.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class HttpResponse:
    """A status code paired with a JSON-serializable body."""

    status_code: int
    body: Any


def http_ok(body: Any) -> HttpResponse:
    return HttpResponse(status_code=200, body=body)


def http_created(body: Any) -> HttpResponse:
    return HttpResponse(status_code=201, body=body)


def http_bad_request(body: Any) -> HttpResponse:
    return HttpResponse(status_code=400, body=body)


def http_server_error(error: BaseException) -> HttpResponse:
    """Wrap an unexpected failure in a 500 envelope.

    Only the error message reaches the body; tracebacks and exception
    attributes stay in the logs.
    """
    message = str(error) or error.__class__.__name__
    return HttpResponse(status_code=500, body={"message": message})
