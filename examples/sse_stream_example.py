"""
Server-Sent Events example using streaming_http.

This example demonstrates how to consume an event stream line by line,
reconnecting with Last-Event-ID when the stream fails, and how to read
a whole response at once.
"""

import logging
import sys
import time
from typing import Optional

from streaming_http import StreamingHTTPConnection, StreamingHTTPError
from streaming_http.http_primitives import URLComponents

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def stream_events(url: str, proxy: Optional[str] = None, max_events: int = 10) -> None:
    """Print events from url, reconnecting after failures."""
    retry_delay = 1.0
    target = URLComponents.from_url(url)
    last_event_id = None
    received = 0

    while received < max_events:
        headers = {
            "Host": target.authority,
            "Accept": "text/event-stream",
            "Cache-Control": "no-cache",
        }
        if last_event_id is not None:
            headers["Last-Event-ID"] = last_event_id

        try:
            with StreamingHTTPConnection(
                target, proxy=proxy, headers=headers, read_timeout=60.0
            ) as conn:
                logger.info(f"Connected: status {conn.status}")
                retry_delay = 1.0
                if conn.status != 200:
                    logger.error(f"Unexpected status, body: {conn.read_all()[:200]!r}")
                    return

                for line in conn.read_lines():
                    line = line.rstrip("\r\n")
                    if line.startswith("id:"):
                        last_event_id = line[3:].strip()
                    elif line.startswith("data:"):
                        logger.info(f"Event data: {line[5:].strip()}")
                    elif not line:
                        received += 1
                        if received >= max_events:
                            break
        except StreamingHTTPError as e:
            logger.warning(f"Stream failed, reconnecting in {retry_delay:.0f}s: {e}")
            time.sleep(retry_delay)
            retry_delay = min(retry_delay * 2, 30.0)


def fetch(url: str) -> None:
    """Read a complete response body."""
    target = URLComponents.from_url(url)
    with StreamingHTTPConnection(target, headers={"Host": target.authority}) as conn:
        body = conn.read_all()
        logger.info(f"Response status: {conn.status}")
        logger.info(f"Response body length: {len(body)} bytes")
        logger.info(f"Metrics: {conn.metrics}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(f"usage: {sys.argv[0]} URL [PROXY_URL]")
        sys.exit(1)

    stream_events(sys.argv[1], proxy=sys.argv[2] if len(sys.argv) > 2 else None)
