"""Factory for creating exchange adapter instances."""

from __future__ import annotations

import logging
from typing import Any, Type

from ..archive import RawResponseArchive
from ..settings import Settings
from .base import BaseExchangeAdapter
from .binance import BinanceAdapter
from .bitget import BitgetAdapter
from .bybit import BybitAdapter
from .gate import GateAdapter
from .okx import OKXAdapter
from .signing import Signer

logger = logging.getLogger(__name__)

# Insertion order is the merge priority.
EXCHANGE_ADAPTERS: dict[str, Type[BaseExchangeAdapter]] = {
    "okx": OKXAdapter,
    "binance": BinanceAdapter,
    "bybit": BybitAdapter,
    "gate": GateAdapter,
    "bitget": BitgetAdapter,
}


def create_exchange_adapter(
    exchange: str,
    signer: Signer,
    *,
    archive: RawResponseArchive | None = None,
    **options: Any,
) -> BaseExchangeAdapter:
    """Create an exchange adapter instance.

    Args:
        exchange: Exchange id (okx, binance, bybit, gate, bitget)
        signer: Signer holding the process credentials
        archive: Raw response archive
        **options: base_url, timeout_ms, proxy, params

    Returns:
        Configured exchange adapter

    Raises:
        ValueError: If exchange is not supported
    """
    exchange_lower = exchange.lower()

    if exchange_lower not in EXCHANGE_ADAPTERS:
        supported = ", ".join(EXCHANGE_ADAPTERS.keys())
        raise ValueError(
            f"Unsupported exchange: {exchange}. Supported exchanges: {supported}"
        )

    adapter_class = EXCHANGE_ADAPTERS[exchange_lower]

    if signer.credentials_for(exchange_lower).is_empty:
        logger.warning("%s API credentials not found, using public endpoint", adapter_class.display_name)

    return adapter_class(signer, archive=archive, **options)


def create_adapters_from_settings(
    settings: Settings,
    signer: Signer,
    archive: RawResponseArchive | None = None,
) -> list[BaseExchangeAdapter]:
    """Create every enabled adapter, in merge priority order."""
    adapters: list[BaseExchangeAdapter] = []

    for exchange_name in EXCHANGE_ADAPTERS:
        exchange_config = settings.exchange(exchange_name)
        if not exchange_config.enabled:
            logger.debug("Exchange %s is disabled, skipping", exchange_name)
            continue

        adapters.append(
            create_exchange_adapter(
                exchange_name,
                signer,
                archive=archive,
                base_url=exchange_config.base_url,
                timeout_ms=settings.collector.timeout_ms,
                proxy=settings.proxy.proxy_url,
            )
        )
        logger.info("Initialized exchange adapter for %s", exchange_name)

    return adapters
