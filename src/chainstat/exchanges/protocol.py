"""Protocol definition for exchange adapters."""

from __future__ import annotations

from typing import Protocol

from ..models import TokenRecord


class ExchangeAdapter(Protocol):
    """Protocol for one exchange's deposit/withdraw data source."""

    exchange_id: str

    @property
    def name(self) -> str:
        """Canonical display name used in ``ExchangeEntry.name`` (e.g. ``OKX``)."""
        ...

    async def fetch(self) -> list[TokenRecord]:
        """Fetch the exchange's currencies as token records.

        Never raises: transport errors, timeouts and error envelopes all
        resolve to an empty list.

        Returns:
            Token records in API response order
        """
        ...

    async def close(self) -> None:
        """Close connections (HTTP session)."""
        ...
