"""
streaming_http - Streaming HTTP responses for event-stream consumers

Sends a GET request, optionally through an HTTP proxy tunnel, and exposes
the response body as a single blocking read or as a lazy sequence of text
lines, as needed by Server-Sent Events clients.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .connection import StreamingHTTPConnection, ConnectionState
from .reader import HTTPResponseReader, ReaderState
from .parser import ResponseParser
from .http_primitives import URLComponents, ProxyInfo
from .exceptions import (
    StreamingHTTPError,
    ConnectionError,
    ProtocolError,
    TimeoutError,
    NetworkError,
)

__all__ = [
    "StreamingHTTPConnection",
    "ConnectionState",
    "HTTPResponseReader",
    "ReaderState",
    "ResponseParser",
    "URLComponents",
    "ProxyInfo",
    "StreamingHTTPError",
    "ConnectionError",
    "ProtocolError",
    "TimeoutError",
    "NetworkError",
]
