"""Golden unit tests validating CLI parsing behavior."""

from pathlib import Path

from webworker.bootstrap.config import (
    DEFAULT_CONFINE_TO_ROOT,
    DEFAULT_PORT,
    DEFAULT_SHUTDOWN_GRACE_SECONDS,
    DEFAULT_SOCKET_TIMEOUT,
    build_server_config,
    parse_cli_args,
)


def test_parse_cli_args_uses_defaults() -> None:
    """Defaults serve the working directory on localhost."""
    args = parse_cli_args([])

    assert args.directory == "."
    assert args.host == "localhost"
    assert args.port == DEFAULT_PORT
    assert args.log_level == "INFO"
    assert args.log_destination == "stdout"
    assert args.log_format == "json"
    assert args.socket_timeout == DEFAULT_SOCKET_TIMEOUT
    assert args.shutdown_grace_seconds == DEFAULT_SHUTDOWN_GRACE_SECONDS
    assert args.confine_to_root is DEFAULT_CONFINE_TO_ROOT


def test_parse_cli_args_honors_overrides(tmp_path: Path) -> None:
    """Overrides should replace defaults when flags are present."""
    args = parse_cli_args(
        [
            "--directory",
            tmp_path.as_posix(),
            "--host",
            "0.0.0.0",
            "--port",
            "9090",
            "--log-level",
            "debug",
            "--log-destination",
            "server.log",
            "--log-format",
            "TEXT",
            "--socket-timeout",
            "5",
            "--shutdown-grace-seconds",
            "1",
            "--confine-to-root",
        ]
    )

    assert args.directory == tmp_path.as_posix()
    assert args.host == "0.0.0.0"
    assert args.port == 9090
    assert args.log_level == "DEBUG"
    assert args.log_destination == "server.log"
    assert args.log_format == "text"
    assert args.socket_timeout == 5
    assert args.shutdown_grace_seconds == 1
    assert args.confine_to_root is True


def test_build_server_config_maps_arguments(tmp_path: Path) -> None:
    args = parse_cli_args(["--directory", tmp_path.as_posix(), "--socket-timeout", "7"])
    config = build_server_config(args)

    assert config.document_root == tmp_path.as_posix()
    assert config.socket_timeout == 7
    assert config.confine_to_root is False


def test_zero_socket_timeout_disables_timeout() -> None:
    config = build_server_config(parse_cli_args(["--socket-timeout", "0"]))
    assert config.socket_timeout is None
