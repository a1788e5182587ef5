"""Web worker server: one thread and one request per accepted connection."""

import signal
import sys
from typing import Optional

from webworker.bootstrap.config import build_server_config, parse_cli_args
from webworker.bootstrap.logging_setup import configure_logging
from webworker.domain.correlation_id import component_logger
from webworker.lifecycle.state import ServerLifecycle
from webworker.transport.accept_loop import run_server

SERVER_LOGGER = component_logger("server")


def main(argv: Optional[list[str]] = None) -> None:
    """Parse arguments, configure logging and serve until signalled."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level, args.log_destination, args.log_format == "json")
    config = build_server_config(args)
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        SERVER_LOGGER.info("Received shutdown signal", extra={"signal": signum})
        lifecycle.request_stop()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting web worker server",
        extra={
            "event": "server_starting",
            "host": args.host,
            "port": args.port,
            "directory": config.document_root,
            "log_destination": args.log_destination,
            "log_level": args.log_level,
            "socket_timeout": config.socket_timeout,
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
            "confine_to_root": config.confine_to_root,
        },
    )
    run_server(args.host, args.port, config, lifecycle)


if __name__ == "__main__":
    main()
