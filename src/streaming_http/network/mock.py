"""
Mock network implementations for testing.

This module provides mock implementations of NetworkStream and NetworkBackend
that can be used for unit testing without requiring actual network connections.
"""

from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple, Union

from ..exceptions import ConnectionError, NetworkError
from .backend import NetworkBackend
from .stream import NetworkStream

ReadStep = Union[bytes, Exception]


class MockNetworkStream(NetworkStream):
    """
    Mock network stream for testing.

    Reads are served from a script of steps. Each step is either a bytes
    chunk, returned by one read call (split if larger than max_bytes), or
    an exception instance, raised by one read call. Once the script is
    exhausted reads return b"" (end of stream).
    """

    def __init__(self, *steps: ReadStep):
        """
        Initialize the mock stream.

        Args:
            steps: Initial read script.
        """
        self._steps: Deque[ReadStep] = deque(steps)
        self._closed = False
        self._extra_info: Dict[str, Any] = {}
        self._write_buffer: List[bytes] = []
        self.read_count = 0
        self.read_timeouts: List[Optional[float]] = []

    def read(self, max_bytes: int, timeout: Optional[float] = None) -> bytes:
        """
        Serve the next step of the read script.

        Raises:
            NetworkError: If the stream is closed.
        """
        if self._closed:
            raise NetworkError("Stream is closed")

        self.read_count += 1
        self.read_timeouts.append(timeout)

        if not self._steps:
            return b""

        step = self._steps.popleft()
        if isinstance(step, Exception):
            raise step

        if len(step) > max_bytes:
            self._steps.appendleft(step[max_bytes:])
            step = step[:max_bytes]
        return step

    def write(self, data: bytes) -> None:
        """
        Record data written to the mock stream.

        Raises:
            NetworkError: If the stream is closed.
        """
        if self._closed:
            raise NetworkError("Stream is closed")

        self._write_buffer.append(data)

    def close(self) -> None:
        """Close the mock stream."""
        self._closed = True

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)

    @property
    def is_closed(self) -> bool:
        """Check if the mock stream is closed."""
        return self._closed

    @property
    def written_data(self) -> bytes:
        """Get all data that was written to the stream."""
        return b"".join(self._write_buffer)

    @property
    def pending_steps(self) -> int:
        """Number of read steps not yet consumed."""
        return len(self._steps)

    def set_extra_info(self, name: str, value: Any) -> None:
        """
        Set extra information for the mock stream.

        Args:
            name: The name of the information.
            value: The value to set.
        """
        self._extra_info[name] = value

    def add_data(self, *steps: ReadStep) -> None:
        """
        Append steps to the read script.

        Args:
            steps: Bytes chunks or exceptions to serve after the current ones.
        """
        self._steps.extend(steps)


class MockNetworkBackend(NetworkBackend):
    """
    Mock network backend for testing.

    Streams are registered per (host, port) ahead of time; connecting to an
    unregistered endpoint yields an empty stream, and endpoints listed with
    refuse() fail with ConnectionError.
    """

    def __init__(self):
        """Initialize the mock backend."""
        self._streams: Dict[Tuple[str, int], MockNetworkStream] = {}
        self._refused: Dict[Tuple[str, int], str] = {}
        self.connect_calls: List[Tuple[str, str, int, Optional[float]]] = []

    def add_stream(self, host: str, port: int, stream: MockNetworkStream) -> MockNetworkStream:
        """Register the stream returned when connecting to host:port."""
        self._streams[(host, port)] = stream
        return stream

    def refuse(self, host: str, port: int, reason: str = "Connection refused") -> None:
        """Make connections to host:port fail."""
        self._refused[(host, port)] = reason

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None
    ) -> MockNetworkStream:
        """
        Return the mock stream registered for host:port.

        Raises:
            ConnectionError: If the endpoint was refused.
        """
        self.connect_calls.append(("tcp", host, port, timeout))
        return self._open(host, port)

    def connect_tls(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> MockNetworkStream:
        """
        Return the mock stream registered for host:port, marked as TLS.

        Raises:
            ConnectionError: If the endpoint was refused.
        """
        self.connect_calls.append(("tls", host, port, timeout))
        stream = self._open(host, port)
        stream.set_extra_info("ssl_object", True)
        stream.set_extra_info("server_hostname", host)
        return stream

    def start_tls(
        self,
        stream: MockNetworkStream,
        host: str,
        timeout: Optional[float] = None,
    ) -> MockNetworkStream:
        """Mark an existing mock stream as TLS."""
        stream.set_extra_info("ssl_object", True)
        stream.set_extra_info("server_hostname", host)
        return stream

    def get_connection(self, host: str, port: int) -> Optional[MockNetworkStream]:
        """Get the mock stream registered for host:port, if any."""
        return self._streams.get((host, port))

    def _open(self, host: str, port: int) -> MockNetworkStream:
        key = (host, port)
        if key in self._refused:
            raise ConnectionError(f"Cannot connect to {host}:{port}: {self._refused[key]}")
        if key not in self._streams:
            self._streams[key] = MockNetworkStream()
        return self._streams[key]
