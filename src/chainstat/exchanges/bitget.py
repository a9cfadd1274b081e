"""Bitget exchange adapter."""

from __future__ import annotations

import logging
from typing import Any

from ..models import ChainEntry, TokenRecord
from .base import BaseExchangeAdapter, ExchangeAPIError, iter_items
from .normalization import status_from_flag, text

logger = logging.getLogger(__name__)


class BitgetAdapter(BaseExchangeAdapter):
    """Bitget public coin list. The endpoint carries no display names."""

    exchange_id = "bitget"
    display_name = "Bitget"
    default_base_url = "https://api.bitget.com"
    endpoint = "/api/v2/spot/public/coins"

    def check_envelope(self, payload: Any) -> None:
        if not isinstance(payload, dict) or payload.get("code") != "00000":
            msg = payload.get("msg") if isinstance(payload, dict) else None
            raise ExchangeAPIError(self.display_name, msg or "unexpected response")

    def parse(self, payload: dict[str, Any]) -> list[TokenRecord]:
        tokens: dict[str, TokenRecord] = {}

        for item in iter_items(payload.get("data")):
            symbol = text(item.get("coin"))
            if not symbol:
                continue

            chains = [
                ChainEntry(
                    chain=text(chain.get("chain")),
                    deposit_status=status_from_flag(chain.get("rechargeable")),
                    withdraw_status=status_from_flag(chain.get("withdrawable")),
                    contract_address=text(chain.get("contractAddress")),
                    min_withdraw=text(chain.get("minWithdrawAmount")),
                    withdraw_fee=text(chain.get("withdrawFee")),
                )
                for chain in iter_items(item.get("chains"))
            ]
            self._append_entry(tokens, symbol, symbol, chains)

        return list(tokens.values())
