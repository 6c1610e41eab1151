"""
Network utilities for streaming_http.

This module provides helper functions for socket configuration,
SSL context setup, and URL parsing.
"""

import socket
import ssl
from typing import Optional, Tuple, Union
from urllib.parse import urlparse


def create_ssl_context(
    verify_mode: int = ssl.CERT_REQUIRED,
    check_hostname: bool = True,
    ca_file: Optional[str] = None,
) -> ssl.SSLContext:
    """
    Create an SSL context for client connections.
    
    Args:
        verify_mode: SSL verification mode
        check_hostname: Whether to verify hostname
        ca_file: Optional path to a CA bundle to trust instead of the
                 system default
    
    Returns:
        Configured SSL context
    
    Raises:
        ssl.SSLError: If SSL context creation fails
    """
    context = ssl.create_default_context(cafile=ca_file)
    context.check_hostname = check_hostname
    context.verify_mode = verify_mode
    
    context.options |= ssl.OP_NO_COMPRESSION
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    
    return context


def parse_url(url: str) -> Tuple[str, str, int, str]:
    """
    Parse URL into components.
    
    Args:
        url: URL string to parse
    
    Returns:
        Tuple of (scheme, host, port, request target)
    
    Raises:
        ValueError: If URL is malformed
    """
    parsed = urlparse(url)
    
    scheme = parsed.scheme or "http"
    if scheme not in ("http", "https"):
        raise ValueError(f"Unsupported URL scheme: {scheme}")
    
    host = parsed.hostname or ""
    if not host:
        raise ValueError("No hostname found in URL")
    
    port = parsed.port
    if port is None:
        port = 443 if scheme == "https" else 80
    
    # The fragment never goes on the wire
    path = parsed.path or "/"
    if parsed.query:
        path += "?" + parsed.query
    
    return scheme, host, port, path


def validate_port(port: Union[int, str]) -> int:
    """
    Validate and convert port to integer.
    
    Args:
        port: Port number (int or string)
    
    Returns:
        Port as integer
    
    Raises:
        ValueError: If port is invalid
    """
    try:
        port_int = int(port)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid port: {port}")
    
    if not (1 <= port_int <= 65535):
        raise ValueError(f"Port must be between 1 and 65535, got {port_int}")
    
    return port_int


def set_socket_timeout(sock: socket.socket, timeout: Optional[float]) -> None:
    """
    Set socket timeout.
    
    Args:
        sock: Socket object
        timeout: Timeout in seconds (None for blocking)
    """
    if timeout is not None:
        sock.settimeout(timeout)
    else:
        sock.settimeout(None)


def get_socket_info(sock: socket.socket) -> dict:
    """
    Get information about a socket.
    
    Args:
        sock: Socket object
    
    Returns:
        Dictionary with socket information
    """
    info = {}
    
    try:
        info['peername'] = sock.getpeername()
    except OSError:
        info['peername'] = None
    
    try:
        info['sockname'] = sock.getsockname()
    except OSError:
        info['sockname'] = None
    
    return info
