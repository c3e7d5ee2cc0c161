"""NAV feed client for the AMFI daily NAV catalog."""

import logging

import httpx

from folio.config import NAV_FEED_URL
from folio.errors import UpstreamUnavailableError, UpstreamUnreadableError

logger = logging.getLogger(__name__)


class NavFeedClient:
    """Downloads the NAV catalog and returns it line by line.

    A fresh HTTP client is opened per fetch; nothing is cached or retried.
    """

    def __init__(
        self,
        url: str = NAV_FEED_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self._transport = transport

    async def fetch(self) -> list[str]:
        """Return the feed body split on newlines.

        Raises:
            UpstreamUnavailableError: network failure or non-2xx status.
            UpstreamUnreadableError: the body could not be read.
        """
        async with httpx.AsyncClient(
            transport=self._transport, follow_redirects=True
        ) as client:
            try:
                async with client.stream("GET", self.url) as resp:
                    if not resp.is_success:
                        raise UpstreamUnavailableError(
                            f"nav feed returned HTTP {resp.status_code}"
                        )
                    try:
                        await resp.aread()
                    except httpx.HTTPError as e:
                        raise UpstreamUnreadableError(
                            f"could not read nav feed: {e}"
                        ) from e
                    body = resp.text
            except httpx.HTTPError as e:
                raise UpstreamUnavailableError(f"could not fetch nav feed: {e}") from e

        lines = body.split("\n")
        logger.debug(f"Fetched {len(lines)} NAV lines")
        return lines


nav_feed_client = NavFeedClient()
