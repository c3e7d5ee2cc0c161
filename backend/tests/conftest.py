"""Shared fixtures."""

import json
from pathlib import Path

import httpx
import pytest

from folio.config import AccountCredentials, Settings, get_settings
from folio.models.fund import Account
from folio.services.nav_feed import NavFeedClient

NAV_LINES = [
    "Scheme Code;ISIN Div Payout/ISIN Growth;ISIN Div Reinvestment;Scheme Name;Net Asset Value;Date",
    "",
    "Open Ended Schemes(Equity Scheme - Large Cap Fund)",
    "100001;ABC;-;ABC Bluechip Fund - Direct Growth;50.0;01-Apr-2020",
    "100002;XYZ;-;XYZ Liquid Fund - Direct Growth;20.0;01-Apr-2020",
    "100003;GLD;-;GLD Gold ETF Fund of Fund;12.5;01-Apr-2020",
]


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        credentials={
            Account.EQUITY: AccountCredentials(api_key="eqkey", api_secret="eqsecret"),
            Account.DEBT: AccountCredentials(api_key="debtkey", api_secret="debtsecret"),
        },
        data_dir=tmp_path,
    )


def make_feed(lines: list[str] = NAV_LINES, status_code: int = 200) -> NavFeedClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text="\n".join(lines))

    return NavFeedClient(url="https://nav.test/NAVAll.txt", transport=httpx.MockTransport(handler))


def write_snapshot(directory: Path, name: str, funds: list[dict]) -> Path:
    path = directory / name
    path.write_text(json.dumps({"funds": funds}), encoding="utf-8")
    return path
