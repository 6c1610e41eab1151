"""
Network backend components for streaming_http.

This module provides the low-level networking abstractions: blocking
streams with per-read timeouts and the backends that open them.
"""

from .backend import NetworkBackend
from .stream import NetworkStream
from .sockets import SocketNetworkBackend, SocketNetworkStream
from .mock import MockNetworkBackend, MockNetworkStream
from .utils import (
    create_ssl_context,
    parse_url,
    validate_port,
    set_socket_timeout,
    get_socket_info,
)

__all__ = [
    "NetworkBackend", 
    "NetworkStream",
    "SocketNetworkBackend",
    "SocketNetworkStream",
    "MockNetworkBackend", 
    "MockNetworkStream",
    "create_ssl_context",
    "parse_url",
    "validate_port",
    "set_socket_timeout",
    "get_socket_info",
]
