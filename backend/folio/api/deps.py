"""FastAPI dependencies shared by the routers."""

from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from folio.config import Settings, get_settings
from folio.services.broker import BrokerClient, broker_client
from folio.services.classifier import DEFAULT_RULES, ClassificationRule, load_rules
from folio.services.nav_feed import NavFeedClient, nav_feed_client
from folio.services.store import PortfolioStore
from folio.services.valuation import PortfolioValuationService


@lru_cache
def _store_for(directory: Path) -> PortfolioStore:
    # One store per directory so its per-account write locks are shared
    return PortfolioStore(directory)


@lru_cache
def _rules_from(path: Path | None) -> tuple[ClassificationRule, ...]:
    if path is None:
        return DEFAULT_RULES
    return load_rules(path)


def get_store(settings: Settings = Depends(get_settings)) -> PortfolioStore:
    return _store_for(settings.data_dir)


def get_rules(settings: Settings = Depends(get_settings)) -> tuple[ClassificationRule, ...]:
    return _rules_from(settings.rules_file)


def get_broker_client() -> BrokerClient:
    return broker_client


def get_nav_feed_client() -> NavFeedClient:
    return nav_feed_client


def get_valuation_service(
    store: PortfolioStore = Depends(get_store),
    feed: NavFeedClient = Depends(get_nav_feed_client),
) -> PortfolioValuationService:
    return PortfolioValuationService(store, feed)
