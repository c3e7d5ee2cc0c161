"""Kite Connect broker client: login URL, session exchange, MF holdings."""

import logging
from collections.abc import Callable
from typing import Any

from kiteconnect import KiteConnect

from folio.errors import AuthRejectedError, HoldingsFetchFailedError
from folio.models.fund import RawHolding

logger = logging.getLogger(__name__)


class BrokerClient:
    """Wraps the Kite SDK.

    A new SDK instance is created per call; the client holds no session
    between requests. The SDK is blocking, so callers on the event loop
    should run these methods in a worker thread.
    """

    def __init__(self, kite_factory: Callable[..., Any] | None = None):
        self._kite_factory = kite_factory or KiteConnect

    def login_url(self, api_key: str) -> str:
        kite = self._kite_factory(api_key=api_key)
        try:
            return kite.login_url()
        finally:
            _close(kite)

    def list_holdings(
        self, api_key: str, api_secret: str, request_token: str
    ) -> list[RawHolding]:
        """Exchange the request token for a session and list MF holdings.

        Raises:
            AuthRejectedError: session generation failed.
            HoldingsFetchFailedError: the holdings call failed or returned
                records without the expected fields.
        """
        kite = self._kite_factory(api_key=api_key)
        try:
            result = self._fetch_holdings(kite, api_secret, request_token)
        finally:
            _close(kite)

        logger.info(f"Fetched {len(result)} MF holdings")
        return result

    def _fetch_holdings(
        self, kite: Any, api_secret: str, request_token: str
    ) -> list[RawHolding]:
        try:
            data = kite.generate_session(request_token, api_secret=api_secret)
            access_token = data["access_token"]
        except Exception as e:
            raise AuthRejectedError(f"could not generate kite session: {e}") from e

        kite.set_access_token(access_token)

        try:
            holdings = kite.mf_holdings()
            result = [
                RawHolding(
                    fund=str(h["fund"]),
                    tradingsymbol=str(h["tradingsymbol"]),
                    quantity=float(h["quantity"]),
                )
                for h in holdings
            ]
        except Exception as e:
            raise HoldingsFetchFailedError(f"cannot get holdings: {e}") from e
        return result


def _close(kite: Any) -> None:
    # The SDK opens a requests.Session per instance
    session = getattr(kite, "reqsession", None)
    if session is not None:
        session.close()


broker_client = BrokerClient()
