"""
Custom exceptions for streaming_http.

This module defines the exception hierarchy raised by connections,
response readers and network streams.
"""

from typing import Optional


class StreamingHTTPError(Exception):
    """Base exception for all streaming_http errors."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConnectionError(StreamingHTTPError):
    """Raised when a connection (or proxy tunnel) cannot be established."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Connection error: {message}", cause)


class ProtocolError(StreamingHTTPError):
    """Raised when the response violates HTTP or ends before its headers."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Protocol error: {message}", cause)


class TimeoutError(StreamingHTTPError):
    """Raised when a single read call exceeds its timeout."""
    
    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        if timeout is not None:
            message = f"{message} (timeout: {timeout}s)"
        super().__init__(f"Timeout error: {message}", cause)
        self.timeout = timeout


class NetworkError(StreamingHTTPError):
    """Raised when reading from or writing to a stream fails."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Network error: {message}", cause)
