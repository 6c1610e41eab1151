"""
Streaming HTTP connection for streaming_http.

This module implements StreamingHTTPConnection, which sends one GET
request (directly or through an HTTP proxy tunnel) and exposes the
response through an HTTPResponseReader.
"""

import logging
import time
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union

from .exceptions import ConnectionError, ProtocolError
from .http_primitives import (
    HeadersInput,
    ProxyInfo,
    URLComponents,
    build_proxy_request,
    build_request,
    normalize_headers,
)
from .network.backend import NetworkBackend
from .network.sockets import SocketNetworkBackend
from .network.stream import NetworkStream
from .reader import HTTPResponseReader

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """States of a streaming connection."""
    CONNECTING = "connecting"  # Opening the stream and sending the request
    OPEN = "open"              # Headers received, body available
    CLOSED = "closed"          # Stream closed, cannot be read


class StreamingHTTPConnection:
    """
    A single streaming HTTP request/response cycle.

    The constructor connects, sends the request and blocks until the
    response headers have arrived. The body is then available through
    read_lines() or read_all(). Closing the connection from another
    thread makes a blocked read fail.
    """

    # Default configuration
    DEFAULT_CONNECT_TIMEOUT = 10.0  # 10 seconds
    DEFAULT_READ_TIMEOUT = 300.0  # 5 minutes

    def __init__(
        self,
        url: Union[str, URLComponents],
        proxy: Union[str, ProxyInfo, None] = None,
        headers: Optional[HeadersInput] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        backend: Optional[NetworkBackend] = None,
        chunk_size: Optional[int] = None,
    ):
        """
        Connect, send the request and wait for the response headers.

        Args:
            url: Target URL
            proxy: Optional HTTP proxy, as a URL or ProxyInfo
            headers: Request headers, sent in order
            connect_timeout: Timeout for establishing the connection in seconds
            read_timeout: Timeout for each individual read in seconds
            backend: Network backend used to open the stream
            chunk_size: Maximum bytes requested per read

        Raises:
            ConnectionError: If the connection or proxy tunnel cannot be established
            ProtocolError: If the stream ends before the response headers
            TimeoutError: If a read times out before the response headers
            NetworkError: If writing the request or reading the response fails
        """
        self._url = url if isinstance(url, URLComponents) else URLComponents.from_url(url)
        self._proxy = ProxyInfo.from_url(proxy) if isinstance(proxy, str) else proxy
        self._headers = normalize_headers(headers)

        # Configuration
        self._connect_timeout = connect_timeout or self.DEFAULT_CONNECT_TIMEOUT
        self._read_timeout = read_timeout or self.DEFAULT_READ_TIMEOUT
        self._chunk_size = chunk_size
        self._backend = backend or SocketNetworkBackend()

        self._stream: Optional[NetworkStream] = None
        self._reader: Optional[HTTPResponseReader] = None
        self._state = ConnectionState.CONNECTING

        # Metrics
        self._bytes_sent = 0
        self._lines_read = 0
        self._connect_time: Optional[float] = None

        start_time = time.time()
        try:
            pending = self._open_stream()
            self._send(build_request(self._url, self._headers))
            logger.debug(f"Sent GET {self._url.target} to {self._url.authority}")

            self._reader = HTTPResponseReader(
                self._stream,
                self._read_timeout,
                chunk_size=self._chunk_size,
                initial_data=pending,
            )
        except Exception as e:
            logger.error(
                f"Request to {self._url.authority} failed: {e} "
                f"({time.time() - start_time:.3f}s)"
            )
            self.close()
            raise

        self._connect_time = time.time() - start_time
        self._state = ConnectionState.OPEN
        logger.debug(
            f"Response {self.status} from {self._url.authority} "
            f"({self._connect_time:.3f}s)"
        )

    def __enter__(self) -> "StreamingHTTPConnection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the connection. Safe to call more than once.
        """
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.close()
            logger.debug(f"Connection to {self._url.authority} closed")
        self._state = ConnectionState.CLOSED

    @property
    def status(self) -> int:
        """The response status code."""
        return self._reader.status

    @property
    def headers(self) -> Dict[str, str]:
        """The response headers, keyed by lower-cased name."""
        return self._reader.headers

    @property
    def is_closed(self) -> bool:
        return self._state == ConnectionState.CLOSED

    def read_lines(self) -> Iterator[str]:
        """
        Generator that returns one line of the response body at a time
        (delimited by \\r, \\n or \\r\\n) until the response is fully
        consumed or the connection is closed.
        """
        for line in self._reader.read_lines():
            self._lines_read += 1
            yield line

    def read_all(self) -> bytes:
        """Consume the entire response body and return it."""
        return self._reader.read_all()

    @property
    def metrics(self) -> Dict[str, Any]:
        """
        Get connection metrics.

        Returns:
            Dictionary with connection metrics
        """
        return {
            "bytes_sent": self._bytes_sent,
            "bytes_received": self._reader.bytes_received if self._reader else 0,
            "lines_read": self._lines_read,
            "connect_time": self._connect_time,
            "state": self._state.value,
        }

    def _open_stream(self) -> bytes:
        """
        Open the stream to the target, tunneling through the proxy if set.

        Returns:
            Response bytes that arrived along with the tunnel confirmation.
        """
        if self._proxy is None:
            self._stream = self._connect(self._url.host, self._url.port, self._url.is_secure)
            return b""

        self._stream = self._connect(self._proxy.host, self._proxy.port, self._proxy.is_secure)
        pending = self._open_tunnel()

        if self._url.is_secure:
            if pending:
                raise ProtocolError("proxy sent data before the TLS handshake")
            self._stream = self._backend.start_tls(
                self._stream, self._url.host, self._connect_timeout
            )
        return pending

    def _connect(self, host: str, port: int, secure: bool) -> NetworkStream:
        if secure:
            return self._backend.connect_tls(host, port, self._connect_timeout)
        return self._backend.connect_tcp(host, port, self._connect_timeout)

    def _open_tunnel(self) -> bytes:
        """
        Ask the proxy for a tunnel to the target and check its answer.

        Raises:
            ConnectionError: If the proxy refuses the tunnel
        """
        self._send(build_proxy_request(self._url, self._proxy))

        tunnel = HTTPResponseReader(
            self._stream,
            self._read_timeout,
            chunk_size=self._chunk_size,
            method=b"CONNECT",
        )
        if not 200 <= tunnel.status < 300:
            raise ConnectionError(
                f"Proxy {self._proxy.host}:{self._proxy.port} refused tunnel to "
                f"{self._url.authority} with status {tunnel.status}"
            )

        logger.debug(
            f"Tunnel to {self._url.authority} open via "
            f"{self._proxy.host}:{self._proxy.port}"
        )
        return tunnel.unconsumed

    def _send(self, data: bytes) -> None:
        self._stream.write(data)
        self._bytes_sent += len(data)
