"""Logging filters for enriching log records with request context.

``RequestIdFilter`` injects the current request id into log records
using the ContextVar set by the gateway middleware. It is attached to the
JSON handler in ``gateway.settings.LOGGING`` so every ``orders`` log line
carries the id without changing individual log statements.
"""

from logging import Filter, LogRecord
from .middleware import REQUEST_ID_CTX


class RequestIdFilter(Filter):
    """Attach a ``request_id`` attribute to log records.

    If no request is in flight the ContextVar default (``"-"``) is used,
    so formatters can always reference ``%(request_id)s``.
    """

    def filter(self, record: LogRecord) -> bool:
        """Populate ``record.request_id`` and allow the record to be logged.

        Returns:
            bool: Always True to indicate the record should be processed.
        """
        if not getattr(record, "request_id", None):
            record.request_id = REQUEST_ID_CTX.get()
        return True
