"""Binance exchange adapter."""

from __future__ import annotations

import logging
from typing import Any

from ..models import ChainEntry, TokenRecord
from .base import BaseExchangeAdapter, ExchangeAPIError, iter_items
from .normalization import status_from_flag, text

logger = logging.getLogger(__name__)


class BinanceAdapter(BaseExchangeAdapter):
    """Binance capital config: one item per coin with its ``networkList``."""

    exchange_id = "binance"
    display_name = "Binance"
    default_base_url = "https://api.binance.com"
    endpoint = "/sapi/v1/capital/config/getall"

    def check_envelope(self, payload: Any) -> None:
        # Success is a bare list; errors come back as {"code": ..., "msg": ...}
        if not isinstance(payload, list):
            msg = payload.get("msg") if isinstance(payload, dict) else None
            raise ExchangeAPIError(self.display_name, msg or "unexpected response")

    def parse(self, payload: list[Any]) -> list[TokenRecord]:
        tokens: dict[str, TokenRecord] = {}

        for item in iter_items(payload):
            symbol = text(item.get("coin"))
            if not symbol:
                continue

            chains = [
                ChainEntry(
                    chain=text(network.get("network")),
                    deposit_status=status_from_flag(network.get("depositEnable")),
                    withdraw_status=status_from_flag(network.get("withdrawEnable")),
                    contract_address=text(network.get("contractAddress")),
                    min_withdraw=text(network.get("withdrawMin")),
                    withdraw_fee=text(network.get("withdrawFee")),
                )
                for network in iter_items(item.get("networkList"))
            ]
            self._append_entry(tokens, symbol, item.get("name"), chains)

        return list(tokens.values())
