"""Unit tests covering request head parsing."""

import io
import logging

import pytest

from webworker.domain.http_types import RequestLine
from webworker.pipeline.request_reader import (
    MalformedRequestLine,
    parse_request_line,
    read_request,
)


class TrackingStream(io.BytesIO):
    """BytesIO that records how many lines were consumed."""

    def __init__(self, payload: bytes):
        super().__init__(payload)
        self.lines_read = 0

    def readline(self, size=-1):
        line = super().readline(size)
        if line:
            self.lines_read += 1
        return line


def test_read_request_extracts_method_and_path():
    """The second token of the first line is the requested path."""
    stream = io.BytesIO(
        b"GET /index.html HTTP/1.1\r\nHost: localhost\r\nUser-Agent: t\r\n\r\n"
    )
    assert read_request(stream) == RequestLine("GET", "/index.html")


def test_read_request_stops_at_first_empty_line():
    """Bytes after the blank line stay unread on the stream."""
    stream = TrackingStream(b"GET /a.txt HTTP/1.1\nHost: x\n\nleftover body\n")
    read_request(stream)
    assert stream.lines_read == 3
    assert stream.read() == b"leftover body\n"


def test_read_request_accepts_end_of_stream_as_terminator():
    stream = io.BytesIO(b"GET /page.html HTTP/1.1\r\nHost: x\r\n")
    assert read_request(stream).path == "/page.html"


def test_read_request_ignores_later_lines_that_look_like_requests():
    stream = io.BytesIO(b"GET /first.html HTTP/1.1\r\nGET /second.html HTTP/1.1\r\n\r\n")
    assert read_request(stream).path == "/first.html"


@pytest.mark.parametrize(
    "payload",
    [b"", b"\r\n", b"GET\r\n\r\n", b"   \r\n\r\n"],
)
def test_read_request_rejects_lines_without_path(payload):
    """A first line with fewer than two tokens is a malformed request."""
    with pytest.raises(MalformedRequestLine):
        read_request(io.BytesIO(payload))


def test_malformed_request_line_is_a_value_error():
    with pytest.raises(ValueError):
        parse_request_line("GET")


def test_parse_request_line_splits_on_any_whitespace():
    assert parse_request_line("GET\t/x.png  HTTP/1.1") == RequestLine("GET", "/x.png")


def test_read_request_logs_each_raw_line(caplog):
    """Every request line is logged at debug level."""
    caplog.set_level(logging.DEBUG, logger="webworker")
    read_request(io.BytesIO(b"GET /index.html HTTP/1.1\r\nHost: h\r\n\r\n"))
    lines = [
        record.line
        for record in caplog.records
        if getattr(record, "event", None) == "request_line"
    ]
    assert lines == ["GET /index.html HTTP/1.1", "Host: h", ""]


def test_read_request_skips_blank_lines_before_request_line():
    """A stray blank line ahead of the request line is not the terminator."""
    stream = io.BytesIO(b"\r\n\r\nGET /index.html HTTP/1.1\r\nHost: x\r\n\r\ntail")
    assert read_request(stream) == RequestLine("GET", "/index.html")
    assert stream.read() == b"tail"


def test_read_request_with_only_blank_lines_is_malformed():
    with pytest.raises(MalformedRequestLine):
        read_request(io.BytesIO(b"\r\n\n\r\n"))
