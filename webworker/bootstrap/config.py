"""Server configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


DEFAULT_PORT = _env_int("WEBWORKER_PORT", 8080)
DEFAULT_SOCKET_TIMEOUT = _env_int("WEBWORKER_SOCKET_TIMEOUT", 60)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("WEBWORKER_SHUTDOWN_GRACE_SECONDS", 30)
DEFAULT_CONFINE_TO_ROOT = _env_bool("WEBWORKER_CONFINE_TO_ROOT", False)

SERVER_IDENTIFICATION = "Jon's very own server"
SERVER_DISPLAY_NAME = "Xitlally's Server"
FAVICON_HREF = "./test/favicon.png"
STREAM_CHUNK_SIZE = 65536


@dataclass
class ServerConfig:
    """Runtime settings handed to every worker."""

    document_root: str = "."
    socket_timeout: Optional[int] = DEFAULT_SOCKET_TIMEOUT
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS
    confine_to_root: bool = DEFAULT_CONFINE_TO_ROOT


def build_server_config(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed CLI arguments into a ServerConfig."""
    return ServerConfig(
        document_root=args.directory,
        socket_timeout=args.socket_timeout if args.socket_timeout > 0 else None,
        shutdown_grace_seconds=args.shutdown_grace_seconds,
        confine_to_root=args.confine_to_root,
    )


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(description="Single-request web worker server")
    parser.add_argument(
        "--directory",
        default=".",
        help="Document root that requested paths are prefixed with",
    )
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    default_log_level = os.getenv("WEBWORKER_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("WEBWORKER_LOG_DESTINATION", "stdout")
    default_log_format = os.getenv("WEBWORKER_LOG_FORMAT", "json").lower()
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=default_log_format,
        choices=["json", "text"],
        type=str.lower,
    )
    parser.add_argument(
        "--socket-timeout",
        type=int,
        default=DEFAULT_SOCKET_TIMEOUT,
        help="Seconds a client may stay silent before the exchange aborts (0 waits forever)",
    )
    parser.add_argument(
        "--shutdown-grace-seconds",
        type=int,
        default=DEFAULT_SHUTDOWN_GRACE_SECONDS,
        help="Grace period in seconds for in-flight exchanges on shutdown",
    )
    parser.add_argument(
        "--confine-to-root",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_CONFINE_TO_ROOT,
        help="Treat paths escaping the document root as missing",
    )
    return parser.parse_args(argv)
