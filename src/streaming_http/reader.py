"""
HTTP response reader for streaming_http.

This module implements HTTPResponseReader, which reads one response from
a NetworkStream either all at once or as a stream of text lines. Incoming
bytes are fed to a ResponseParser; the body reaches the reader's buffer
through the parser's callbacks.
"""

import logging
import re
import threading
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import ProtocolError
from .network.stream import NetworkStream
from .parser import ResponseParser

logger = logging.getLogger(__name__)

_LINE_END = re.compile(rb"[\r\n]")


class ReaderState(Enum):
    """States of a response reader."""
    AWAITING_HEADERS = "awaiting_headers"  # Status line and headers not parsed yet
    STREAMING = "streaming"                # Headers known, body may still arrive
    FINISHED = "finished"                  # Parser signaled end of message


class HTTPResponseReader:
    """
    Reader for a single HTTP response.

    The constructor blocks until the status and headers have been read.
    After that the body can be consumed with read_lines() or read_all();
    more data is read from the stream only when the buffer cannot satisfy
    the caller.

    Parser callbacks may run on a different thread than the one reading,
    so the buffer and state are guarded by a lock. The blocking stream
    read itself is never made while holding it.
    """

    DEFAULT_CHUNK_SIZE = 10000

    def __init__(
        self,
        stream: NetworkStream,
        read_timeout: Optional[float],
        chunk_size: Optional[int] = None,
        method: bytes = b"GET",
        initial_data: bytes = b"",
        encoding: str = "utf-8",
    ) -> None:
        """
        Initialize the reader and wait for the response headers.

        Args:
            stream: Stream the request was written to. Not owned.
            read_timeout: Timeout for each individual read in seconds
            chunk_size: Maximum bytes requested per read
            method: Method of the request being answered
            initial_data: Response bytes already received by the caller
            encoding: Text encoding used for lines

        Raises:
            ProtocolError: If the stream ends before the headers are complete
                           or the response is malformed.
            TimeoutError: If a read times out before the headers arrive.
            NetworkError: If reading from the stream fails.
        """
        self._stream = stream
        self._read_timeout = read_timeout
        self._chunk_size = chunk_size or self.DEFAULT_CHUNK_SIZE
        self._encoding = encoding

        self._lock = threading.Lock()
        self._buffer = bytearray()
        self._state = ReaderState.AWAITING_HEADERS
        self._eof = False

        self._status: Optional[int] = None
        self._headers: Dict[str, str] = {}
        self.bytes_received = 0

        # Callbacks must be registered before any data reaches the parser
        self._parser = ResponseParser(
            method=method,
            on_headers=self._on_headers,
            on_body=self._on_body,
            on_complete=self._on_complete,
        )

        if initial_data:
            self._feed(initial_data)

        while self.state is ReaderState.AWAITING_HEADERS:
            if not self._read_chunk_into_buffer():
                raise ProtocolError("unexpected end of stream")

    @property
    def status(self) -> int:
        return self._status

    @property
    def headers(self) -> Dict[str, str]:
        """Response headers keyed by lower-cased name."""
        return self._headers

    @property
    def state(self) -> ReaderState:
        with self._lock:
            return self._state

    @property
    def unconsumed(self) -> bytes:
        """Bytes that arrived after the response ended, such as tunnel data."""
        return self._parser.unconsumed

    def read_lines(self) -> Iterator[str]:
        """
        Generator that yields one line of the body at a time.

        Lines are delimited by \\r, \\n or \\r\\n and keep their delimiter.
        An unterminated last line is yielded when the body ends. Abandoning
        the generator leaves unread data on the stream untouched.
        """
        while True:
            line = self._read_line()
            if line is None:
                return
            yield line

    def read_all(self) -> bytes:
        """Consume the rest of the body and return it."""
        while self._read_chunk_into_buffer():
            pass

        with self._lock:
            body = bytes(self._buffer)
            self._buffer.clear()
        return body

    def _read_chunk_into_buffer(self) -> bool:
        """
        Read more data from the stream into the parser.

        Returns True if data was read, False if the response is finished
        or the stream has ended. Timeouts and read failures propagate.
        """
        with self._lock:
            if self._state is ReaderState.FINISHED or self._eof:
                return False

        data = self._stream.read(self._chunk_size, self._read_timeout)
        if not data:
            with self._lock:
                self._eof = True
            logger.debug(f"End of stream after {self.bytes_received} bytes")
            return False

        self._feed(data)
        return True

    def _feed(self, data: bytes) -> None:
        self.bytes_received += len(data)
        self._parser.feed(data)

    def _read_line(self) -> Optional[str]:
        """Extract the next line, refilling the buffer as needed."""
        while True:
            with self._lock:
                line = self._take_line(final=False)
            if line is not None:
                return line

            if not self._read_chunk_into_buffer():
                with self._lock:
                    return self._take_line(final=True)

    def _take_line(self, final: bool) -> Optional[str]:
        # Caller holds self._lock
        match = _LINE_END.search(self._buffer)
        if match is None:
            if final and self._buffer:
                end = len(self._buffer)
            else:
                return None
        else:
            end = match.end()
            # \r\n is one terminator only when both bytes are buffered
            if (
                self._buffer[match.start()] == 0x0D
                and end < len(self._buffer)
                and self._buffer[end] == 0x0A
            ):
                end += 1

        line = bytes(self._buffer[:end])
        del self._buffer[:end]
        return line.decode(self._encoding, errors="replace")

    def _on_headers(self, status_code: int, headers: List[Tuple[bytes, bytes]]) -> None:
        normalized = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in headers
        }
        with self._lock:
            self._status = status_code
            self._headers = normalized
            if self._state is ReaderState.AWAITING_HEADERS:
                self._state = ReaderState.STREAMING
        logger.debug(f"Received response headers: status {status_code}")

    def _on_body(self, data: bytes) -> None:
        with self._lock:
            self._buffer += data

    def _on_complete(self) -> None:
        with self._lock:
            self._state = ReaderState.FINISHED
