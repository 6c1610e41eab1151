"""
Tests for the callback-driven response parser.
"""

import pytest

from streaming_http.exceptions import ProtocolError
from streaming_http.parser import ResponseParser


class RecordingParser:
    """Collects every callback a ResponseParser makes."""

    def __init__(self, method: bytes = b"GET") -> None:
        self.events = []
        self.parser = ResponseParser(
            method=method,
            on_headers=lambda status, headers: self.events.append(("headers", status, headers)),
            on_body=lambda data: self.events.append(("body", data)),
            on_complete=lambda: self.events.append(("complete",)),
        )

    def body(self) -> bytes:
        return b"".join(event[1] for event in self.events if event[0] == "body")


class TestResponseParser:
    """Test ResponseParser callbacks."""

    def test_content_length_response(self):
        recorder = RecordingParser()
        recorder.parser.feed(b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\nX-Name: v\r\n\r\nhello")

        assert recorder.events[0] == (
            "headers", 200, [(b"Content-Length", b"5"), (b"X-Name", b"v")]
        )
        assert recorder.body() == b"hello"
        assert recorder.events[-1] == ("complete",)
        assert recorder.parser.finished

    def test_headers_keep_server_casing(self):
        recorder = RecordingParser()
        recorder.parser.feed(b"HTTP/1.1 204 No Content\r\nCONTENT-type: text/plain\r\n\r\n")

        assert recorder.parser.status_code == 204
        assert recorder.parser.headers == [(b"CONTENT-type", b"text/plain")]

    def test_byte_at_a_time(self):
        recorder = RecordingParser()
        data = b"HTTP/1.1 200 OK\r\nContent-Length: 3\r\n\r\nabc"
        for i in range(len(data)):
            recorder.parser.feed(data[i:i + 1])

        assert [event[0] for event in recorder.events if event[0] != "body"] == [
            "headers", "complete"
        ]
        assert recorder.body() == b"abc"

    def test_chunked_body(self):
        recorder = RecordingParser()
        recorder.parser.feed(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"6\r\ndata: \r\n"
        )
        assert not recorder.parser.finished

        recorder.parser.feed(b"2\r\n1\n\r\n0\r\n\r\n")

        assert recorder.body() == b"data: 1\n"
        assert recorder.parser.finished

    def test_body_until_close_is_streamed(self):
        recorder = RecordingParser()
        recorder.parser.feed(b"HTTP/1.1 200 OK\r\nConnection: close\r\n\r\ndata: 1\n")

        assert recorder.body() == b"data: 1\n"
        assert not recorder.parser.finished

    def test_informational_response_skipped(self):
        recorder = RecordingParser()
        recorder.parser.feed(
            b"HTTP/1.1 100 Continue\r\n\r\n"
            b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"
        )

        assert recorder.events == [("headers", 200, [(b"Content-Length", b"0")]), ("complete",)]

    def test_complete_fires_once(self):
        recorder = RecordingParser()
        recorder.parser.feed(b"HTTP/1.1 200 OK\r\nContent-Length: 1\r\n\r\nx")
        recorder.parser.feed(b"ignored")

        assert recorder.events.count(("complete",)) == 1

    def test_malformed_response(self):
        parser = ResponseParser()

        with pytest.raises(ProtocolError, match="Malformed response"):
            parser.feed(b"NOT HTTP AT ALL\r\n\r\n")

    def test_connect_accepted(self):
        recorder = RecordingParser(method=b"CONNECT")
        recorder.parser.feed(b"HTTP/1.1 200 Connection established\r\n\r\nHTTP/1.1")

        assert recorder.events == [("headers", 200, []), ("complete",)]
        assert recorder.parser.unconsumed == b"HTTP/1.1"

    def test_connect_refused_has_body(self):
        recorder = RecordingParser(method=b"CONNECT")
        recorder.parser.feed(
            b"HTTP/1.1 407 Proxy Authentication Required\r\nContent-Length: 6\r\n\r\ndenied"
        )

        assert recorder.parser.status_code == 407
        assert recorder.body() == b"denied"
        assert recorder.parser.finished
