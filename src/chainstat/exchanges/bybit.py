"""Bybit exchange adapter."""

from __future__ import annotations

import logging
from typing import Any

from ..models import ChainEntry, TokenRecord
from .base import BaseExchangeAdapter, ExchangeAPIError, iter_items
from .normalization import status_from_flag, text

logger = logging.getLogger(__name__)


class BybitAdapter(BaseExchangeAdapter):
    """Bybit coin info: ``result.rows`` with per-coin ``chains``.

    Bybit does not publish contract addresses on this endpoint.
    """

    exchange_id = "bybit"
    display_name = "Bybit"
    default_base_url = "https://api.bybit.com"
    endpoint = "/v5/asset/coin/query-info"

    def check_envelope(self, payload: Any) -> None:
        if not isinstance(payload, dict) or payload.get("retCode") != 0:
            msg = payload.get("retMsg") if isinstance(payload, dict) else None
            raise ExchangeAPIError(self.display_name, msg or "unexpected response")

    def parse(self, payload: dict[str, Any]) -> list[TokenRecord]:
        tokens: dict[str, TokenRecord] = {}
        result = payload.get("result") or {}

        for item in iter_items(result.get("rows") if isinstance(result, dict) else None):
            symbol = text(item.get("coin"))
            if not symbol:
                continue

            chains = [
                ChainEntry(
                    chain=text(chain.get("chain")),
                    deposit_status=status_from_flag(chain.get("chainDeposit")),
                    withdraw_status=status_from_flag(chain.get("chainWithdraw")),
                    contract_address="",
                    min_withdraw=text(chain.get("withdrawMin")),
                    withdraw_fee=text(chain.get("withdrawFee")),
                )
                for chain in iter_items(item.get("chains"))
            ]
            self._append_entry(tokens, symbol, item.get("name"), chains)

        return list(tokens.values())
