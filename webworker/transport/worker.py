"""Worker thread logic: one exchange per accepted connection."""

import logging
import socket
import threading

from webworker.domain.correlation_id import component_logger, exchange_scope
from webworker.pipeline.exchange import serve_exchange
from webworker.transport.context import WorkerContext

WORKER_LOGGER = component_logger("transport.worker")


def _close_connection(client_socket: socket.socket, client_addr_str: str) -> None:
    try:
        client_socket.shutdown(socket.SHUT_WR)
    except OSError:
        pass
    try:
        client_socket.close()
    except OSError as error:
        WORKER_LOGGER.warning(
            "Socket close failed",
            extra={
                "event": "socket_close_failed",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
    if WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        WORKER_LOGGER.debug(
            "Socket closed",
            extra={"event": "socket_closed", "client": client_addr_str},
        )


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> None:
    """Serve exactly one request on ``client_socket`` and close it."""
    with exchange_scope():
        _serve_connection(client_socket, client_address, context)


def _serve_connection(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> None:
    current_thread = threading.current_thread()
    lifecycle = context.lifecycle
    if lifecycle is not None:
        lifecycle.register_worker(current_thread)
    client_addr_str = f"{client_address[0]}:{client_address[1]}"
    WORKER_LOGGER.debug(
        "Handling connection",
        extra={"event": "connection_opened", "client": client_addr_str},
    )

    try:
        client_socket.settimeout(context.config.socket_timeout)
        with client_socket.makefile("rb") as reader, client_socket.makefile(
            "wb"
        ) as writer:
            serve_exchange(reader, writer, context.config)
    except (ConnectionError, TimeoutError, OSError) as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        _close_connection(client_socket, client_addr_str)
        if lifecycle is not None:
            lifecycle.cleanup_worker(current_thread)
        WORKER_LOGGER.debug(
            "Done handling connection",
            extra={"event": "connection_closed", "client": client_addr_str},
        )
