"""Exchange adapters, request signing and field normalization."""

from .protocol import ExchangeAdapter
from .signing import SIGNERS, SignedRequest, Signer
from .normalization import is_enabled, status_from_flag, status_from_disabled_flag
from .base import BaseExchangeAdapter, ExchangeAPIError
from .factory import create_exchange_adapter, create_adapters_from_settings, EXCHANGE_ADAPTERS

__all__ = [
    "ExchangeAdapter",
    "SIGNERS",
    "SignedRequest",
    "Signer",
    "is_enabled",
    "status_from_flag",
    "status_from_disabled_flag",
    "BaseExchangeAdapter",
    "ExchangeAPIError",
    "create_exchange_adapter",
    "create_adapters_from_settings",
    "EXCHANGE_ADAPTERS",
]
