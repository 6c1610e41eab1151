"""
Network stream interface for streaming_http.

This module defines the NetworkStream interface that all network stream
implementations must follow. Reads are blocking, bounded by a per-call
timeout, and report end-of-stream distinctly from a timeout.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class NetworkStream(ABC):
    """
    Interface for blocking byte streams with per-read timeouts.
    
    A stream is used by exactly one response reader at a time, so
    implementations do not need to be safe for concurrent reads.
    """
    
    @abstractmethod
    def read(self, max_bytes: int, timeout: Optional[float] = None) -> bytes:
        """
        Read whatever data is available, up to max_bytes.
        
        Blocks until at least one byte arrives, the peer closes the
        stream, or the timeout expires.
        
        Args:
            max_bytes: Maximum number of bytes to return.
            timeout: Seconds to wait for data. None waits forever.
        
        Returns:
            The bytes read, or b"" if the peer has closed the stream.
        
        Raises:
            TimeoutError: If no data arrives within the timeout.
            NetworkError: If the stream is closed or the read fails.
        """
        pass
    
    @abstractmethod
    def write(self, data: bytes) -> None:
        """
        Write all of data to the stream.
        
        Raises:
            NetworkError: If the stream is closed or the write fails.
        """
        pass
    
    @abstractmethod
    def close(self) -> None:
        """
        Close the stream. Calling close more than once is allowed.
        """
        pass
    
    @abstractmethod
    def get_extra_info(self, name: str) -> Optional[Any]:
        """
        Get extra information about the stream.
        
        Args:
            name: The name of the information to retrieve. Common values include:
                 - "socket": The underlying socket object
                 - "peername": The remote endpoint address
                 - "sockname": The local endpoint address
                 - "ssl_object": The SSL object, if the stream is encrypted
        
        Returns:
            The requested information or None if not available.
        """
        pass
    
    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """
        Check if the stream is closed.
        
        Returns:
            True if the stream is closed, False otherwise.
        """
        pass
