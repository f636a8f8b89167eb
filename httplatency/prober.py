"""
Times a single HTTP GET per address.

One request per call, no retries and no caching. The connection is closed
once the status line and headers are in, the body is never read.
"""

import time
from typing import Optional

import httpx
import structlog

from .errors import ProbeError
from .models import LatencyRecord

logger = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_10_5) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/47.0.2526.106 Safari/537.36"
)


class HTTPProber:
    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        log=None,
    ):
        """Initialize the prober.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: read/write/pool deadline in seconds, None blocks until the
                transport gives up
            connect_timeout: connect deadline in seconds, defaults to ``timeout``
            transport: httpx transport override, used by tests
            log: structlog logger for diagnostics
        """
        self.user_agent = user_agent
        self.timeout = timeout
        self.connect_timeout = connect_timeout if connect_timeout is not None else timeout
        self.log = log or logger

        headers = {
            'User-Agent': self.user_agent,
            'Connection': 'close',
        }
        self._client = httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=self.connect_timeout),
            follow_redirects=False,
            headers=headers,
            limits=httpx.Limits(max_keepalive_connections=0),
            transport=transport,
        )

    def measure(self, address: str) -> LatencyRecord:
        """GET ``address`` and return how long the response took to arrive.

        Raises:
            ProbeError: the request failed at the transport level
        """
        start_time = time.perf_counter()
        try:
            with self._client.stream("GET", address) as response:
                elapsed = time.perf_counter() - start_time
                status_code = response.status_code

        except httpx.TimeoutException as e:
            raise ProbeError(address, f"Timeout: {e}") from e

        except httpx.ConnectError as e:
            raise ProbeError(address, f"Connection error: {e}") from e

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProbeError(address, f"{type(e).__name__}: {e}") from e

        latency_ms = int(round(elapsed * 1000))
        self.log.debug("probe_response", url=address, status_code=status_code, latency_ms=latency_ms)
        return LatencyRecord(url=address, latency_ms=latency_ms)

    def probe(self, address: str) -> Optional[LatencyRecord]:
        """Like measure, but a failed request gives None instead of an exception."""
        self.log.info("probing", url=address)
        try:
            return self.measure(address)
        except ProbeError as e:
            self.log.warning("probe_failed", url=address, reason=e.reason)
            return None

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
