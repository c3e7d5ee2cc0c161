"""Fund records at the broker, storage and valuation stages."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Account(str, Enum):
    EQUITY = "equity"
    DEBT = "debt"


class AssetClass(str, Enum):
    EQUITY = "equity"
    DEBT = "debt"
    GOLD = "gold"


@dataclass(frozen=True)
class RawHolding:
    """One mutual-fund holding as reported by the broker."""

    fund: str
    tradingsymbol: str
    quantity: float


class StoredFund(BaseModel):
    """A classified holding as persisted in a snapshot file."""

    model_config = ConfigDict(populate_by_name=True)

    asset_class: AssetClass = Field(alias="class")
    name: str
    symbol: str = Field(min_length=1)
    month: str | None = None  # "MM/YYYY", only for time-accruing records
    quantity: float = Field(ge=0)
    price: float = Field(default=0.0, ge=0)


@dataclass
class PricedFund:
    """A holding during valuation; quantity and price may be updated."""

    asset_class: AssetClass
    name: str
    symbol: str
    quantity: float
    price: float
    month: str | None = None

    @classmethod
    def from_stored(cls, fund: StoredFund) -> "PricedFund":
        return cls(
            asset_class=fund.asset_class,
            name=fund.name,
            symbol=fund.symbol,
            quantity=fund.quantity,
            price=fund.price,
            month=fund.month,
        )

    @property
    def value(self) -> float:
        return self.quantity * self.price
