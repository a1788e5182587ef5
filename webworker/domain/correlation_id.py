"""Exchange IDs carried through every log record of one connection."""

import contextlib
import contextvars
import logging
import uuid
from typing import Any, Iterator, MutableMapping, Optional

LOGGER_PREFIX = "webworker."

_exchange_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "exchange_id", default=None
)


def current_exchange_id() -> Optional[str]:
    """Return the ID of the exchange running in this context, if any."""
    return _exchange_id_var.get()


@contextlib.contextmanager
def exchange_scope(exchange_id: Optional[str] = None) -> Iterator[str]:
    """Tag log records emitted inside the block with one exchange ID."""
    token = _exchange_id_var.set(exchange_id or str(uuid.uuid4()))
    try:
        yield _exchange_id_var.get()
    finally:
        _exchange_id_var.reset(token)


def component_logger(name: str) -> "CorrelationLoggerAdapter":
    """Return an adapter for the ``webworker.<name>`` logger."""
    return CorrelationLoggerAdapter(logging.getLogger(LOGGER_PREFIX + name), {})


class CorrelationLoggerAdapter(logging.LoggerAdapter):
    """Adds ``correlation_id`` and ``component`` to every record's extras."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["correlation_id"] = current_exchange_id() or "-"
        extra["component"] = self.logger.name.removeprefix(LOGGER_PREFIX)
        kwargs["extra"] = extra
        return msg, kwargs
