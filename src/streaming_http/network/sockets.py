"""
Blocking socket implementation of the network interfaces.

SocketNetworkStream wraps a connected (optionally TLS-wrapped) socket and
maps socket failures onto the streaming_http exception hierarchy.
"""

import logging
import socket
import ssl
import threading
from typing import Any, Optional

from ..exceptions import ConnectionError, NetworkError, TimeoutError
from .backend import NetworkBackend
from .stream import NetworkStream
from .utils import create_ssl_context, get_socket_info, set_socket_timeout

logger = logging.getLogger(__name__)


class SocketNetworkStream(NetworkStream):
    """NetworkStream over a blocking socket with per-call timeouts."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._closed = False
        self._close_lock = threading.Lock()
        self._extra_info = get_socket_info(sock)
        self._extra_info["socket"] = sock
        if isinstance(sock, ssl.SSLSocket):
            self._extra_info["ssl_object"] = sock

    def read(self, max_bytes: int, timeout: Optional[float] = None) -> bytes:
        if self._closed:
            raise NetworkError("Stream is closed")

        try:
            set_socket_timeout(self._sock, timeout)
            data = self._sock.recv(max_bytes)
        except socket.timeout as e:
            raise TimeoutError("No data received", timeout=timeout, cause=e) from e
        except OSError as e:
            if self._closed:
                raise NetworkError("Stream was closed during read", cause=e) from e
            raise NetworkError(f"Read failed: {e}", cause=e) from e

        # A concurrent close() shuts the socket down, which wakes the
        # blocked recv with an empty result; that is not a real EOF.
        if not data and self._closed:
            raise NetworkError("Stream was closed during read")
        return data

    def write(self, data: bytes) -> None:
        if self._closed:
            raise NetworkError("Stream is closed")

        try:
            self._sock.sendall(data)
        except OSError as e:
            raise NetworkError(f"Write failed: {e}", cause=e) from e

    def close(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Already disconnected by the peer
            pass
        self._sock.close()

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)

    @property
    def is_closed(self) -> bool:
        return self._closed


class SocketNetworkBackend(NetworkBackend):
    """
    Network backend that opens blocking TCP and TLS sockets.

    Args:
        ssl_context: Context used for TLS connections. Defaults to
                     create_ssl_context().
    """

    def __init__(self, ssl_context: Optional[ssl.SSLContext] = None) -> None:
        self._ssl_context = ssl_context

    @property
    def ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            self._ssl_context = create_ssl_context()
        return self._ssl_context

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None
    ) -> SocketNetworkStream:
        logger.debug(f"Connecting to {host}:{port}")
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except socket.timeout as e:
            raise ConnectionError(
                f"Timed out connecting to {host}:{port} after {timeout}s", cause=e
            ) from e
        except OSError as e:
            raise ConnectionError(f"Cannot connect to {host}:{port}: {e}", cause=e) from e

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        return SocketNetworkStream(sock)

    def connect_tls(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> SocketNetworkStream:
        stream = self.connect_tcp(host, port, timeout)
        return self.start_tls(stream, host, timeout)

    def start_tls(
        self,
        stream: NetworkStream,
        host: str,
        timeout: Optional[float] = None,
    ) -> SocketNetworkStream:
        sock = stream.get_extra_info("socket")
        if sock is None:
            raise ConnectionError("Cannot start TLS on a stream without a socket")

        logger.debug(f"Starting TLS handshake with {host}")
        try:
            set_socket_timeout(sock, timeout)
            tls_sock = self.ssl_context.wrap_socket(sock, server_hostname=host)
        except socket.timeout as e:
            stream.close()
            raise ConnectionError(
                f"Timed out during TLS handshake with {host}", cause=e
            ) from e
        except (ssl.SSLError, OSError) as e:
            stream.close()
            raise ConnectionError(f"TLS handshake with {host} failed: {e}", cause=e) from e

        return SocketNetworkStream(tls_sock)
