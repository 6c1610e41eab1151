"""
Callback-driven HTTP response parser.

ResponseParser adapts h11's pull-style event API to the push/callback
interface the response reader is written against: bytes go in through
feed(), and header, body and completion callbacks fire as h11 produces
the corresponding events. h11 remains the authority on message framing
(Content-Length, chunked transfer-encoding, end of message).
"""

import logging
from typing import Callable, List, Optional, Tuple

import h11

from .exceptions import ProtocolError

logger = logging.getLogger(__name__)

HeadersCallback = Callable[[int, List[Tuple[bytes, bytes]]], None]
BodyCallback = Callable[[bytes], None]
CompleteCallback = Callable[[], None]


class ResponseParser:
    """
    Parse a single HTTP/1.1 response and report it through callbacks.

    Args:
        method: Method of the request this response answers. Framing
                differs for CONNECT (a 2xx response has no body and hands
                the connection over to the tunnel).
        on_headers: Called with (status_code, [(name, value), ...]) once
                    the final response head has been parsed. Names keep
                    the casing the server sent.
        on_body: Called with each piece of decoded body data.
        on_complete: Called once when the message is complete.
    """

    def __init__(
        self,
        method: bytes = b"GET",
        on_headers: Optional[HeadersCallback] = None,
        on_body: Optional[BodyCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ) -> None:
        self._on_headers = on_headers
        self._on_body = on_body
        self._on_complete = on_complete

        self.status_code: Optional[int] = None
        self.headers: List[Tuple[bytes, bytes]] = []
        self.finished = False

        self._h11 = h11.Connection(h11.CLIENT)
        # h11 only accepts a response after it has seen the request it
        # answers. The request bytes are written by the caller, so the
        # serialized output here is discarded.
        self._h11.send(
            h11.Request(method=method, target=b"/", headers=[(b"Host", b"localhost")])
        )
        self._h11.send(h11.EndOfMessage())

    def feed(self, data: bytes) -> None:
        """
        Feed raw response bytes and dispatch the resulting events.

        Raises:
            ProtocolError: If the data is not a valid HTTP response.
        """
        try:
            self._h11.receive_data(data)
        except RuntimeError as e:
            raise ProtocolError(f"Cannot accept more data: {e}", cause=e) from e
        self._dispatch()

    @property
    def unconsumed(self) -> bytes:
        """Bytes received after the end of the response (e.g. tunnel data)."""
        data, _ = self._h11.trailing_data
        return bytes(data)

    def _dispatch(self) -> None:
        while True:
            try:
                event = self._h11.next_event()
            except h11.RemoteProtocolError as e:
                raise ProtocolError(f"Malformed response: {e}", cause=e) from e

            if event is h11.NEED_DATA or event is h11.PAUSED:
                return

            if isinstance(event, h11.InformationalResponse):
                logger.debug(f"Skipping informational response {event.status_code}")
                continue

            if isinstance(event, h11.Response):
                self.status_code = event.status_code
                self.headers = list(event.headers.raw_items())
                if self._on_headers is not None:
                    self._on_headers(self.status_code, self.headers)
                if self._h11.their_state is h11.SWITCHED_PROTOCOL:
                    # Accepted CONNECT: no body follows, the rest is tunnel data
                    self._finish()
                continue

            if isinstance(event, h11.Data):
                if self._on_body is not None:
                    self._on_body(bytes(event.data))
                continue

            if isinstance(event, h11.EndOfMessage):
                self._finish()
                continue

            if isinstance(event, h11.ConnectionClosed):
                return

    def _finish(self) -> None:
        if self.finished:
            return
        self.finished = True
        if self._on_complete is not None:
            self._on_complete()
