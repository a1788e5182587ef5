"""One request/response exchange over a pair of connection streams."""

import dataclasses
import time
from typing import BinaryIO, Optional

from webworker.bootstrap.config import ServerConfig
from webworker.domain.content_types import mime_type
from webworker.domain.correlation_id import CorrelationLoggerAdapter, component_logger
from webworker.domain.http_types import (
    STATUS_BAD_REQUEST,
    STATUS_NOT_FOUND,
    STATUS_OK,
    ExchangeOutcome,
    ResolvedFile,
)
from webworker.pipeline.file_resolver import resolve_file
from webworker.pipeline.renderer import FAVICON_MARKER, ContentRenderer
from webworker.pipeline.request_reader import MalformedRequestLine, read_request
from webworker.pipeline.response_writer import (
    write_bad_request_header,
    write_envelope_close,
    write_envelope_open,
    write_header,
)

EXCHANGE_LOGGER = component_logger("pipeline.exchange")


def _resolve(
    config: ServerConfig, requested_path: str, injected: dict
) -> ResolvedFile:
    resolved = resolve_file(
        config.document_root, requested_path, config.confine_to_root, **injected
    )
    if FAVICON_MARKER in requested_path and not resolved.exists:
        # The favicon body is synthesized, so it is served either way.
        return dataclasses.replace(resolved, exists=True)
    return resolved


def serve_exchange(
    reader: BinaryIO,
    writer: BinaryIO,
    config: ServerConfig,
    logger: Optional[CorrelationLoggerAdapter] = None,
) -> ExchangeOutcome:
    """Read one request from ``reader`` and write the full response to ``writer``.

    Bytes go out strictly as header, envelope, body, envelope. Transport
    errors propagate to the caller, which owns the connection.

    An injected ``logger`` receives the events of every stage; without one
    each stage logs to its own component logger.
    """
    injected = {} if logger is None else {"logger": logger}
    if logger is None:
        logger = EXCHANGE_LOGGER
    started = time.monotonic()
    try:
        request = read_request(reader, **injected)
    except MalformedRequestLine as error:
        logger.warning(
            "Malformed request received",
            extra={"event": "malformed_request", "error": str(error)},
        )
        write_bad_request_header(writer)
        write_envelope_open(writer)
        write_envelope_close(writer)
        writer.flush()
        return ExchangeOutcome(STATUS_BAD_REQUEST)

    resolved = _resolve(config, request.path, injected)
    content_type = mime_type(resolved.extension)
    write_header(writer, content_type, resolved.exists)
    write_envelope_open(writer)
    bytes_out = 0
    if resolved.exists:
        renderer = ContentRenderer(writer, **injected)
        renderer.render(resolved)
        bytes_out = renderer.bytes_written
    write_envelope_close(writer)
    writer.flush()

    status_code = STATUS_OK if resolved.exists else STATUS_NOT_FOUND
    logger.info(
        "Exchange complete",
        extra={
            "event": "exchange_complete",
            "method": request.method,
            "path": resolved.path,
            "status_code": status_code,
            "content_type": content_type or "-",
            "bytes_out": bytes_out,
            "duration_ms": round((time.monotonic() - started) * 1000, 3),
        },
    )
    return ExchangeOutcome(status_code, resolved.path, content_type)
