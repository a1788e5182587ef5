"""Main connection acceptance loop."""

import socket
import threading

from webworker.bootstrap.config import ServerConfig
from webworker.bootstrap.socket_factory import create_server_socket
from webworker.domain.correlation_id import component_logger
from webworker.lifecycle.state import ServerLifecycle
from webworker.transport.context import WorkerContext
from webworker.transport.worker import handle_client

ACCEPT_LOGGER = component_logger("transport.accept")


def spawn_worker(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> threading.Thread:
    """Start a dedicated thread for one accepted connection."""
    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, context),
        daemon=False,
    )
    thread.start()
    return thread


def run_server(
    host: str, port: int, config: ServerConfig, lifecycle: ServerLifecycle
) -> None:
    """Accept connections until the lifecycle requests a stop."""
    server_socket = create_server_socket(host, port)
    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={"event": "server_listening", "host": host, "port": port},
    )
    context = WorkerContext(config=config, lifecycle=lifecycle)

    try:
        while not lifecycle.should_stop():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={"event": "accept_error", "error_type": type(error).__name__},
                )
                continue
            spawn_worker(client_socket, client_address, context)
    finally:
        server_socket.close()
        ACCEPT_LOGGER.info(
            "Waiting for active connections to complete",
            extra={
                "event": "shutdown_waiting",
                "shutdown_grace_seconds": config.shutdown_grace_seconds,
                "active_workers": lifecycle.active_worker_count(),
            },
        )
        lifecycle.wait_for_workers(config.shutdown_grace_seconds)
        ACCEPT_LOGGER.info("Server shutdown complete", extra={"event": "server_stopped"})
