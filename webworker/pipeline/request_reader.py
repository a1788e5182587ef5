"""Reading the request head off a connection."""

import logging
from typing import BinaryIO, Optional

from webworker.domain.correlation_id import CorrelationLoggerAdapter, component_logger
from webworker.domain.http_types import RequestLine

REQUEST_LOGGER = component_logger("pipeline.request")

REQUEST_ENCODING = "iso-8859-1"


class MalformedRequestLine(ValueError):
    """Raised when the first request line does not carry a path token."""


def _strip_terminator(raw_line: bytes) -> bytes:
    if raw_line.endswith(b"\r\n"):
        return raw_line[:-2]
    if raw_line.endswith(b"\n") or raw_line.endswith(b"\r"):
        return raw_line[:-1]
    return raw_line


def parse_request_line(line: str) -> RequestLine:
    """Split the first request line into its method and path tokens."""
    tokens = line.split()
    if len(tokens) < 2:
        raise MalformedRequestLine(f"Invalid request line: {line!r}")
    return RequestLine(method=tokens[0], path=tokens[1])


def read_request(
    stream: BinaryIO, logger: CorrelationLoggerAdapter = REQUEST_LOGGER
) -> RequestLine:
    """Consume the request head and return the parsed first line.

    Empty lines ahead of the request line are skipped. After it, lines are
    read until the first empty one or end of stream and dropped; only the
    request line itself is interpreted.
    """
    first_line: Optional[str] = None
    while True:
        raw_line = stream.readline()
        if not raw_line:
            break
        line = _strip_terminator(raw_line).decode(REQUEST_ENCODING)
        if logger.logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Request line read", extra={"event": "request_line", "line": line}
            )
        if first_line is None:
            if line:
                first_line = line
            continue
        if not line:
            break

    if first_line is None:
        raise MalformedRequestLine("Connection closed before a request line")
    return parse_request_line(first_line)
