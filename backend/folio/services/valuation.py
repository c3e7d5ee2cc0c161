"""Portfolio valuation and allocation.

Algorithm, per request:
    funds   = all snapshot funds on disk
    lines   = current NAV catalog
    price_i = NAV(symbol_i)              for priced funds
    qty_i   = months since month_i       for "NA" funds named "... monthly"
    amount_c = Σ qty_i * price_i over funds of asset class c
"""

import logging
import re
from collections.abc import Callable, Iterable
from datetime import date

from fastapi.concurrency import run_in_threadpool

from folio.config import MONTHLY_SUFFIX, NA_SYMBOL
from folio.errors import FolioError, MalformedDateError
from folio.models.fund import AssetClass, PricedFund, StoredFund
from folio.models.portfolio import Allocation
from folio.services.nav_feed import NavFeedClient
from folio.services.nav_parser import parse_nav
from folio.services.store import PortfolioStore

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"([0-9]{1,2})/([0-9]{4})")

ALLOCATION_ORDER = (AssetClass.EQUITY, AssetClass.DEBT, AssetClass.GOLD)


def months_elapsed(since: str | None, today: date | None = None) -> int:
    """Whole calendar months from ``since`` ("MM/YYYY") to ``today``."""
    match = _MONTH_RE.fullmatch(since or "")
    if match is None:
        raise MalformedDateError(f"expected MM/YYYY, got {since!r}")
    since_month, since_year = int(match.group(1)), int(match.group(2))
    if not 1 <= since_month <= 12:
        raise MalformedDateError(f"month out of range in {since!r}")

    today = today or date.today()
    elapsed = (today.year - since_year) * 12 + today.month - since_month
    if elapsed < 0:
        raise MalformedDateError(f"{since!r} is in the future")
    return elapsed


def price_funds(
    funds: Iterable[StoredFund], lines: list[str], today: date | None = None
) -> list[PricedFund]:
    """Apply current prices (or accrued month counts) to stored funds."""
    priced = []
    for stored in funds:
        f = PricedFund.from_stored(stored)
        if f.symbol == NA_SYMBOL:
            if f.name.endswith(MONTHLY_SUFFIX):
                f.quantity = float(months_elapsed(f.month, today))
        else:
            try:
                f.price = parse_nav(lines, f.symbol)
            except FolioError as e:
                raise type(e)(f"failed to fetch value: {e} for {f.name}") from e
        priced.append(f)
    return priced


def allocate(funds: Iterable[PricedFund]) -> list[Allocation]:
    totals = {asset_class: 0.0 for asset_class in ALLOCATION_ORDER}
    for f in funds:
        totals[f.asset_class] += f.value
    return [Allocation(name=c, amount=totals[c]) for c in ALLOCATION_ORDER]


class PortfolioValuationService:
    """Loads snapshots, prices them against the NAV feed and sums by class."""

    def __init__(
        self,
        store: PortfolioStore,
        feed: NavFeedClient,
        clock: Callable[[], date] = date.today,
    ):
        self.store = store
        self.feed = feed
        self.clock = clock

    async def allocations(self) -> list[Allocation]:
        funds = await run_in_threadpool(self.store.load_all)
        lines = await self.feed.fetch()
        priced = price_funds(funds, lines, self.clock())
        logger.debug(f"Priced {len(priced)} funds")
        return allocate(priced)
