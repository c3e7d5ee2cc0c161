"""Tests for portfolio valuation."""

from datetime import date

import pytest

from folio.errors import MalformedDateError, SymbolNotFoundError
from folio.models.fund import AssetClass, PricedFund, StoredFund
from folio.services.store import PortfolioStore
from folio.services.valuation import (
    PortfolioValuationService,
    allocate,
    months_elapsed,
    price_funds,
)

from conftest import NAV_LINES, make_feed, write_snapshot


class TestMonthsElapsed:
    def test_same_year(self):
        assert months_elapsed("01/2020", date(2020, 4, 17)) == 3

    def test_across_year_boundary(self):
        assert months_elapsed("12/2019", date(2020, 2, 1)) == 2

    def test_same_month(self):
        assert months_elapsed("10/2026", date(2026, 10, 19)) == 0

    def test_single_digit_month(self):
        assert months_elapsed("1/2020", date(2021, 1, 1)) == 12

    def test_defaults_to_today(self):
        today = date.today()
        assert months_elapsed(f"{today.month:02d}/{today.year}") == 0

    @pytest.mark.parametrize("value", [None, "", "2020-01", "01-2020", "13/2020", "00/2020", "1/20", "ab/cdef", "01/2020/x", "01/2020\n", "\uff10\uff11/2020", "01/\u0662\u0660\u0662\u0660"])
    def test_malformed(self, value):
        with pytest.raises(MalformedDateError):
            months_elapsed(value, date(2020, 4, 1))

    def test_future_month(self):
        with pytest.raises(MalformedDateError, match="future"):
            months_elapsed("06/2020", date(2020, 4, 1))

    def test_next_year(self):
        with pytest.raises(MalformedDateError):
            months_elapsed("01/2021", date(2020, 12, 31))


def _stored(symbol, asset_class, quantity, price=0.0, name=None, month=None):
    return StoredFund(
        asset_class=asset_class,
        name=name or f"{symbol} fund",
        symbol=symbol,
        quantity=quantity,
        price=price,
        month=month,
    )


class TestPriceFunds:
    def test_prices_from_nav(self):
        (f,) = price_funds([_stored("ABC", AssetClass.EQUITY, 10)], NAV_LINES)
        assert f.price == 50.0
        assert f.quantity == 10

    def test_monthly_na_fund_accrues_months(self):
        fund = _stored("NA", AssetClass.DEBT, 0, price=1000.0, name="pension monthly", month="01/2020")
        (f,) = price_funds([fund], [], date(2020, 4, 1))
        assert f.quantity == 3
        assert f.price == 1000.0

    def test_other_na_fund_unchanged(self):
        fund = _stored("NA", AssetClass.GOLD, 2, price=5000.0, name="physical gold")
        (f,) = price_funds([fund], [])
        assert (f.quantity, f.price) == (2, 5000.0)

    def test_monthly_suffix_is_case_sensitive(self):
        fund = _stored("NA", AssetClass.DEBT, 4, price=100.0, name="pension Monthly")
        (f,) = price_funds([fund], [])
        assert f.quantity == 4

    def test_monthly_without_month_fails(self):
        fund = _stored("NA", AssetClass.DEBT, 0, price=1.0, name="rd monthly")
        with pytest.raises(MalformedDateError):
            price_funds([fund], [])

    def test_monthly_with_future_month_fails(self):
        fund = _stored("NA", AssetClass.DEBT, 0, price=1000.0, name="rd monthly", month="11/2020")
        with pytest.raises(MalformedDateError):
            price_funds([fund], [], date(2020, 4, 1))

    def test_unknown_symbol_names_fund(self):
        with pytest.raises(SymbolNotFoundError, match="ZZZ fund"):
            price_funds([_stored("ZZZ", AssetClass.EQUITY, 1)], NAV_LINES)

    def test_stored_funds_not_mutated(self):
        stored = _stored("ABC", AssetClass.EQUITY, 10)
        price_funds([stored], NAV_LINES)
        assert stored.price == 0.0


def test_allocate_sums_by_class_in_fixed_order():
    funds = [
        PricedFund(AssetClass.GOLD, "g", "G", 2, 10.0),
        PricedFund(AssetClass.EQUITY, "a", "A", 10, 50.0),
        PricedFund(AssetClass.EQUITY, "b", "B", 1.5, 2.0),
        PricedFund(AssetClass.DEBT, "d", "D", 5, 20.0),
    ]
    result = allocate(funds)
    assert [a.name for a in result] == [AssetClass.EQUITY, AssetClass.DEBT, AssetClass.GOLD]
    assert [a.amount for a in result] == [503.0, 100.0, 20.0]


def test_allocate_empty_portfolio():
    assert [a.amount for a in allocate([])] == [0.0, 0.0, 0.0]


@pytest.mark.asyncio
async def test_service_end_to_end(tmp_path):
    write_snapshot(tmp_path, ".portfolio_equity", [{"class": "equity", "name": "ABC", "symbol": "ABC", "quantity": 10, "price": 0}])
    write_snapshot(
        tmp_path,
        ".portfolio_debt",
        [
            {"class": "debt", "name": "XYZ", "symbol": "XYZ", "quantity": 5, "price": 0},
            {"class": "gold", "name": "GLD", "symbol": "GLD", "quantity": 4, "price": 0},
            {"class": "debt", "name": "pension monthly", "symbol": "NA", "month": "01/2020", "quantity": 0, "price": 1000},
        ],
    )
    service = PortfolioValuationService(
        PortfolioStore(tmp_path), make_feed(), clock=lambda: date(2020, 4, 15)
    )

    result = await service.allocations()
    assert [(a.name.value, a.amount) for a in result] == [
        ("equity", 500.0),
        ("debt", 3100.0),
        ("gold", 50.0),
    ]
