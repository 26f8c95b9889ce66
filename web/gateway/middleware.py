"""Middleware that assigns and propagates a request identifier.

This module provides small Django middlewares for the orders gateway:

- ``RequestIdMiddleware`` ensures every incoming HTTP request receives a
  request identifier (UUID). The identifier is read from the incoming
  ``X-Request-Id`` header when provided by the client, or generated
  server-side otherwise. The id is stored on the ``request`` object and
  in a context variable so the payments client and log records can read
  it without passing the value explicitly.
- ``ApiSizeLimitMiddleware`` rejects oversized ``/api/`` bodies with 413
  before they reach the views.
"""

import logging
import uuid
import contextvars

from django.conf import settings
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")

logger = logging.getLogger("orders")


class RequestIdMiddleware(MiddlewareMixin):
    """Django middleware that sets and returns a per-request identifier.

    Attributes:
        HEADER (str): The name of the incoming HTTP header (in Django's
            ``request.META`` casing) that may contain a client-provided id.
        RESPONSE_HEADER (str): The name of the header returned on responses.
    """

    HEADER = "HTTP_X_REQUEST_ID"       # incoming header as found in request.META
    RESPONSE_HEADER = "X-Request-ID"   # header to add to outgoing responses

    def process_request(self, request):
        """Populate the request with a request id and set the context var.

        Args:
            request: Django HttpRequest instance.
        """
        rid = request.META.get(self.HEADER)
        if not rid:
            rid = str(uuid.uuid4())
        request.request_id = rid
        REQUEST_ID_CTX.set(rid)

    def process_response(self, request, response):
        """Add the request id header and log the handled request.

        Args:
            request: Django HttpRequest (may be None in rare cases).
            response: Django HttpResponse to modify.

        Returns:
            The same HttpResponse instance with the ``X-Request-ID`` header set.
        """
        rid = getattr(request, "request_id", REQUEST_ID_CTX.get())
        response[self.RESPONSE_HEADER] = rid
        logger.info(
            "request handled",
            extra={"path": request.path, "method": request.method, "status_code": response.status_code},
        )
        return response


class ApiSizeLimitMiddleware(MiddlewareMixin):
    """Reject ``/api/`` requests whose declared body exceeds API_MAX_BYTES."""

    def process_request(self, request):
        if request.path.startswith("/api/"):
            clen = request.META.get("CONTENT_LENGTH")
            if clen and clen.isdigit() and int(clen) > settings.API_MAX_BYTES:
                return JsonResponse({"detail": "PAYLOAD_TOO_LARGE"}, status=413)
