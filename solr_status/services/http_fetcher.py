"""HTTP GET client for the Solr admin API."""

import asyncio
import logging
from typing import Optional

import httpx

from ..utils.errors import ReadError, TransportError, UnexpectedStatusError


HTTP_TIMEOUT_SECS = 5.0


class HTTPFetcher:
    """
    Fetch raw response bodies with a bounded timeout.

    No retries happen here; the poll loop simply tries again on the
    next tick.
    """

    def __init__(
        self,
        timeout: float = HTTP_TIMEOUT_SECS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize fetcher.

        Args:
            timeout: Overall per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
            logger: Optional logger instance
        """
        self.timeout = timeout
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)

    async def fetch(self, url: str) -> bytes:
        """
        GET a URL and return its body.

        The timeout bounds the whole request, from connecting to the last
        body byte. httpx's own timeout only bounds each network operation.

        Args:
            url: Absolute URL

        Returns:
            bytes: Full response body

        Raises:
            TransportError: Connection failed or timed out before the headers arrived
            UnexpectedStatusError: Status code other than 200
            ReadError: Body could not be read completely in time
        """
        self.logger.debug(f"GET {url}")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True
        ) as client:
            try:
                request = client.build_request("GET", url)
                response = await asyncio.wait_for(
                    client.send(request, stream=True), self.timeout
                )
            except asyncio.TimeoutError as e:
                raise TransportError(
                    f"cannot fetch url: no response within {self.timeout}s", url=url
                ) from e
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise TransportError(f"cannot fetch url: {e}", url=url) from e

            try:
                if response.status_code != 200:
                    raise UnexpectedStatusError(response.status_code, url=url)

                try:
                    return await asyncio.wait_for(
                        response.aread(), max(deadline - loop.time(), 0)
                    )
                except asyncio.TimeoutError as e:
                    raise ReadError(
                        f"cannot read response: body not received within {self.timeout}s",
                        url=url
                    ) from e
                except httpx.HTTPError as e:
                    raise ReadError(f"cannot read response: {e}", url=url) from e
            finally:
                await response.aclose()
