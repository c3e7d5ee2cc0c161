"""Snapshot file schema."""

from pydantic import BaseModel

from folio.models.fund import AssetClass, StoredFund


class Snapshot(BaseModel):
    """Contents of one ``.portfolio_<account>`` file."""

    funds: list[StoredFund] = []

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class Allocation(BaseModel):
    """Total monetary value held in one asset class."""

    name: AssetClass
    amount: float
