"""Body rendering: template substitution for text, raw bytes for the rest."""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterator, Optional

from webworker.bootstrap.config import (
    FAVICON_HREF,
    SERVER_DISPLAY_NAME,
    STREAM_CHUNK_SIZE,
)
from webworker.domain.content_types import is_textual
from webworker.domain.correlation_id import CorrelationLoggerAdapter, component_logger
from webworker.domain.http_types import ResolvedFile
from webworker.pipeline.file_resolver import close_quietly

RENDER_LOGGER = component_logger("pipeline.render")

FAVICON_MARKER = "favicon"
FAVICON_LINK = f'<link rel="icon" type="image/png" href="{FAVICON_HREF}" >'.encode()
DATE_SCRIPT = (
    b' <script language="javascript">\n'
    b"var today = new Date();\n"
    b"document.write(today);\n"
    b"</script>"
)
SERVER_HEADING = f"<h3>Web Server name: {SERVER_DISPLAY_NAME}</h3>\n".encode()


def stream_file(path: str, chunk_size: int = STREAM_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield file contents in fixed-size chunks."""
    with open(path, "rb") as file_handle:
        while True:
            chunk = file_handle.read(chunk_size)
            if not chunk:
                break
            yield chunk


def iter_lines(
    path: str, logger: CorrelationLoggerAdapter = RENDER_LOGGER
) -> Iterator[bytes]:
    """Yield the lines of a file with their terminators removed."""
    handle = open(path, "rb")  # pylint: disable=consider-using-with
    try:
        for raw_line in handle:
            yield raw_line.rstrip(b"\r\n")
    finally:
        close_quietly(handle, path, logger)


@dataclass(frozen=True)
class TemplateRule:
    """A substring and what to emit for a line that contains it."""

    token: bytes
    action: Callable[["ContentRenderer", ResolvedFile, bytes], None]


def _emit_date_script(
    renderer: "ContentRenderer", _resolved: ResolvedFile, _line: bytes
) -> None:
    renderer.write(DATE_SCRIPT)


def _emit_server_heading(
    renderer: "ContentRenderer", _resolved: ResolvedFile, _line: bytes
) -> None:
    renderer.write(SERVER_HEADING)


def _emit_whole_file(
    renderer: "ContentRenderer", resolved: ResolvedFile, _line: bytes
) -> None:
    renderer.stream_raw(resolved.path)


# Evaluated in order; the first rule whose token appears in a line wins.
TEMPLATE_RULES = (
    TemplateRule(b"cs371date", _emit_date_script),
    TemplateRule(b"cs371server", _emit_server_heading),
    # Matches the truncated attribute token literally, not "<img src".
    TemplateRule(b"<img scr", _emit_whole_file),
)


class ContentRenderer:
    """Writes the body of an existing resource to a connection."""

    def __init__(
        self,
        output: BinaryIO,
        logger: CorrelationLoggerAdapter = RENDER_LOGGER,
        rules: tuple[TemplateRule, ...] = TEMPLATE_RULES,
    ) -> None:
        self._output = output
        self._logger = logger
        self._rules = rules
        self.bytes_written = 0

    def write(self, payload: bytes) -> None:
        """Write bytes to the connection and count them."""
        self._output.write(payload)
        self.bytes_written += len(payload)

    def render(self, resolved: ResolvedFile) -> None:
        """Emit the body for ``resolved``, which must already be known to exist."""
        if FAVICON_MARKER in resolved.requested_path:
            self.write(FAVICON_LINK)
            return
        try:
            if is_textual(resolved.extension):
                self._render_template(resolved)
            else:
                self.stream_raw(resolved.path)
        except (FileNotFoundError, PermissionError, IsADirectoryError) as error:
            # The header is already on the wire; the body is cut short.
            self._logger.warning(
                "Unable to read file while rendering",
                extra={
                    "event": "render_failed",
                    "path": resolved.path,
                    "error_type": type(error).__name__,
                },
            )

    def stream_raw(self, path: str) -> None:
        """Copy a file's bytes to the connection unchanged."""
        for chunk in stream_file(path):
            self.write(chunk)
        if self._logger.logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(
                "File streamed", extra={"event": "file_streamed", "path": path}
            )

    def _render_template(self, resolved: ResolvedFile) -> None:
        for line in iter_lines(resolved.path, self._logger):
            rule = self._match(line)
            if rule is None:
                self.write(line)
            else:
                rule.action(self, resolved, line)

    def _match(self, line: bytes) -> Optional[TemplateRule]:
        for rule in self._rules:
            if rule.token in line:
                return rule
        return None
