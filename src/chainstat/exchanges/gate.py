"""Gate.io exchange adapter."""

from __future__ import annotations

import logging
from typing import Any

from ..models import ChainEntry, TokenRecord
from .base import BaseExchangeAdapter, ExchangeAPIError, iter_items
from .normalization import status_from_disabled_flag, text

logger = logging.getLogger(__name__)


class GateAdapter(BaseExchangeAdapter):
    """Gate.io spot currencies.

    One item per (currency, chain), grouped under a single exchange entry per
    currency. Availability is reported as ``*_disabled`` flags.
    """

    exchange_id = "gate"
    display_name = "Gate.io"
    default_base_url = "https://api.gateio.ws"
    endpoint = "/api/v4/spot/currencies"

    def check_envelope(self, payload: Any) -> None:
        # Errors come back as {"label": ..., "message": ...}
        if not isinstance(payload, list):
            msg = payload.get("message") or payload.get("label") if isinstance(payload, dict) else None
            raise ExchangeAPIError(self.display_name, msg or "unexpected response")

    def parse(self, payload: list[Any]) -> list[TokenRecord]:
        tokens: dict[str, TokenRecord] = {}

        for item in iter_items(payload):
            symbol = text(item.get("currency"))
            if not symbol:
                continue

            self._append_chain(
                tokens,
                symbol,
                item.get("name"),
                ChainEntry(
                    chain=text(item.get("chain")),
                    deposit_status=status_from_disabled_flag(item.get("deposit_disabled")),
                    withdraw_status=status_from_disabled_flag(item.get("withdraw_disabled")),
                    contract_address="",
                    min_withdraw=text(item.get("min_withdraw_amount")),
                    withdraw_fee=text(item.get("withdraw_fee")),
                ),
            )

        return list(tokens.values())
