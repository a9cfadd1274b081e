"""OKX exchange adapter."""

from __future__ import annotations

import logging
from typing import Any

from ..models import ChainEntry, TokenRecord
from .base import BaseExchangeAdapter, ExchangeAPIError, iter_items
from .normalization import okx_chain_name, status_from_flag, text

logger = logging.getLogger(__name__)


class OKXAdapter(BaseExchangeAdapter):
    """OKX currencies.

    OKX returns one item per (currency, chain); all chains of a currency are
    collected under a single exchange entry.
    """

    exchange_id = "okx"
    display_name = "OKX"
    default_base_url = "https://www.okx.com"
    endpoint = "/api/v5/asset/currencies"

    def check_envelope(self, payload: Any) -> None:
        if not isinstance(payload, dict) or payload.get("code") != "0":
            msg = payload.get("msg") if isinstance(payload, dict) else "unexpected response"
            raise ExchangeAPIError(self.display_name, msg or "unexpected response")

    def parse(self, payload: dict[str, Any]) -> list[TokenRecord]:
        tokens: dict[str, TokenRecord] = {}

        for item in iter_items(payload.get("data")):
            symbol = text(item.get("ccy"))
            if not symbol:
                continue

            self._append_chain(
                tokens,
                symbol,
                item.get("name"),
                ChainEntry(
                    chain=okx_chain_name(item.get("chain")),
                    deposit_status=status_from_flag(item.get("canDep")),
                    withdraw_status=status_from_flag(item.get("canWd")),
                    contract_address=text(item.get("ctAddr")),
                    min_withdraw=text(item.get("minWd")),
                    withdraw_fee=text(item.get("minFee")),
                ),
            )

        return list(tokens.values())
