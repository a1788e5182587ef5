"""Status line, header block and envelope emission."""

from email.utils import formatdate
from typing import BinaryIO, Optional

from webworker.bootstrap.config import SERVER_IDENTIFICATION

STATUS_LINE_OK = "HTTP/1.1 200 OK"
STATUS_LINE_NOT_FOUND = "HTTP/1.1 404: Not Found"
STATUS_LINE_BAD_REQUEST = "HTTP/1.1 400 Bad Request"

ENVELOPE_OPEN = b"<html><head></head><body>\n"
ENVELOPE_CLOSE = b"</body></html>\n"


def http_date(timestamp: Optional[float] = None) -> str:
    """Format ``timestamp`` (default: now) as an RFC 1123 GMT date."""
    return formatdate(timestamp, usegmt=True)


def build_header_block(
    status_line: str, content_type: Optional[str], timestamp: Optional[float] = None
) -> bytes:
    """Return the newline-terminated header block ending with a blank line."""
    lines = [
        status_line,
        f"Date: {http_date(timestamp)}",
        f"Server: {SERVER_IDENTIFICATION}",
        "Connection: close",
    ]
    if content_type is not None:
        lines.append(f"Content-Type: {content_type}")
    return ("\n".join(lines) + "\n\n").encode()


def write_header(
    stream: BinaryIO, content_type: Optional[str], file_exists: bool
) -> None:
    """Write the 200 or 404 header block for a resolved resource."""
    status_line = STATUS_LINE_OK if file_exists else STATUS_LINE_NOT_FOUND
    stream.write(build_header_block(status_line, content_type))


def write_bad_request_header(stream: BinaryIO) -> None:
    """Write the header block for a request line without a path."""
    stream.write(build_header_block(STATUS_LINE_BAD_REQUEST, "text/html"))


def write_envelope_open(stream: BinaryIO) -> None:
    stream.write(ENVELOPE_OPEN)


def write_envelope_close(stream: BinaryIO) -> None:
    stream.write(ENVELOPE_CLOSE)
