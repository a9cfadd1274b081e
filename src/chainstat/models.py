"""Canonical token / exchange / chain model shared by adapters and the store."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class ChainStatus(str, Enum):
    """Deposit or withdraw availability on one chain."""

    OPEN = "open"
    CLOSED = "closed"


class ChainEntry(BaseModel):
    """One deposit/withdraw path for a token on one exchange.

    Chain names keep the exchange's own naming; they are not normalized across
    exchanges. Numeric fields are kept as text, empty when unknown.
    """

    chain: str = ""
    deposit_status: ChainStatus = ChainStatus.CLOSED
    withdraw_status: ChainStatus = ChainStatus.CLOSED
    contract_address: str = ""
    min_withdraw: str = ""
    withdraw_fee: str = ""

    model_config = {"extra": "forbid"}


class ExchangeEntry(BaseModel):
    """One exchange's presence for a token, chains in API response order."""

    name: str
    chains: list[ChainEntry] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class TokenRecord(BaseModel):
    symbol: str
    name: str = ""
    exchanges: list[ExchangeEntry] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    def exchange(self, name: str) -> ExchangeEntry | None:
        for entry in self.exchanges:
            if entry.name == name:
                return entry
        return None


class Snapshot(BaseModel):
    """One complete, timestamped aggregation result.

    ``error`` is only set when the snapshot is a fallback served after a failed
    collection cycle.
    """

    last_update: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    tokens: list[TokenRecord] = Field(default_factory=list)
    error: str | None = None

    model_config = {"extra": "forbid"}

    def to_json(self, *, indent: int | None = 2) -> str:
        return self.model_dump_json(indent=indent, exclude_none=True)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "Snapshot":
        return cls.model_validate_json(raw)
