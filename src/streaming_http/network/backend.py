"""
Network backend interface for streaming_http.

This module defines the NetworkBackend interface that opens
NetworkStreams to remote hosts.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .stream import NetworkStream


class NetworkBackend(ABC):
    """
    Interface for network backend implementations.
    
    Connections are made with a timeout that bounds only the connect
    (and handshake) phase; reads carry their own timeout.
    """
    
    @abstractmethod
    def connect_tcp(
        self, 
        host: str, 
        port: int, 
        timeout: Optional[float] = None
    ) -> NetworkStream:
        """
        Connect to a TCP endpoint.
        
        Args:
            host: The hostname or IP address to connect to.
            port: The port number to connect to.
            timeout: Optional timeout in seconds for the connection.
        
        Returns:
            A NetworkStream representing the TCP connection.
        
        Raises:
            ConnectionError: If the connection fails or times out.
        """
        pass
    
    @abstractmethod
    def connect_tls(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        """
        Connect to a TCP endpoint and perform a TLS handshake.
        
        Args:
            host: The hostname to connect to, also used for certificate
                  verification.
            port: The port number to connect to.
            timeout: Optional timeout in seconds for connect and handshake.
        
        Returns:
            A NetworkStream representing the TLS connection.
        
        Raises:
            ConnectionError: If the connection or handshake fails or times out.
        """
        pass
    
    @abstractmethod
    def start_tls(
        self,
        stream: NetworkStream,
        host: str,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        """
        Start TLS on an existing stream.
        
        Used after a proxy CONNECT tunnel has been established to an
        https target.
        
        Args:
            stream: The existing NetworkStream to upgrade.
            host: The hostname for TLS certificate verification.
            timeout: Optional timeout in seconds for the handshake.
        
        Returns:
            A NetworkStream representing the TLS connection.
        
        Raises:
            ConnectionError: If the TLS handshake fails.
        """
        pass
