"""
Pytest configuration for streaming_http tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import socket
import threading
from typing import Callable, List, Optional

import pytest

from streaming_http.network.mock import MockNetworkBackend


def build_response(
    body: bytes = b"",
    status: int = 200,
    reason: bytes = b"OK",
    headers: Optional[List[tuple]] = None,
    chunked: bool = False,
) -> bytes:
    """Serialize an HTTP/1.1 response for feeding to mock streams."""
    if headers is None:
        headers = [(b"Content-Type", b"text/event-stream")]
    head = [b"HTTP/1.1 " + str(status).encode() + b" " + reason + b"\r\n"]
    for name, value in headers:
        head.append(name + b": " + value + b"\r\n")
    if chunked:
        head.append(b"Transfer-Encoding: chunked\r\n")
        payload = b""
        if body:
            payload += b"%x\r\n" % len(body) + body + b"\r\n"
        payload += b"0\r\n\r\n"
    else:
        head.append(b"Content-Length: " + str(len(body)).encode() + b"\r\n")
        payload = body
    return b"".join(head) + b"\r\n" + payload


def split_every(data: bytes, size: int) -> List[bytes]:
    """Split data into chunks of at most size bytes."""
    return [data[i:i + size] for i in range(0, len(data), size)]


@pytest.fixture
def mock_backend() -> MockNetworkBackend:
    """Create a mock network backend."""
    return MockNetworkBackend()


@pytest.fixture
def sse_body() -> bytes:
    """A small event-stream body using every kind of line ending."""
    return b"event: foo\ndata: 1\n\r\nid: 2\rdata: 2\r\n\n"


class StubHTTPServer:
    """
    Minimal threaded TCP server for integration tests.

    Each accepted connection records the request head it receives, then
    runs the configured handler with the client socket.
    """

    def __init__(self, handler: Callable[[socket.socket, bytes], None]) -> None:
        self._handler = handler
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(5)
        self.port = self._listener.getsockname()[1]
        self.requests: List[bytes] = []
        self._clients: List[socket.socket] = []
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        self._thread.join(timeout=5)
        self._listener.close()
        for client in self._clients:
            client.close()

    def _serve(self) -> None:
        self._listener.settimeout(0.1)
        while not self._stopped.is_set():
            try:
                client, _ = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            client.settimeout(None)
            self._clients.append(client)
            threading.Thread(target=self._handle, args=(client,), daemon=True).start()

    def _handle(self, client: socket.socket) -> None:
        head = b""
        try:
            while b"\r\n\r\n" not in head:
                data = client.recv(4096)
                if not data:
                    return
                head += data
            self.requests.append(head)
            self._handler(client, head)
        except OSError:
            pass


@pytest.fixture
def stub_server():
    """Start a stub server with the given handler; stopped after the test."""
    servers: List[StubHTTPServer] = []

    def _start(handler: Callable[[socket.socket, bytes], None]) -> StubHTTPServer:
        server = StubHTTPServer(handler)
        server.start()
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.stop()
