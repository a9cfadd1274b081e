"""Field normalization shared by the exchange adapters."""

from __future__ import annotations

from typing import Any

from ..models import ChainStatus

ENABLED_STRINGS = frozenset({"1", "true"})
DISABLED_STRINGS = frozenset({"0", "false"})


def is_enabled(value: Any) -> bool:
    """Return True only for values an exchange uses to mean "enabled".

    Recognized forms:
    - native ``True``
    - integer ``1``
    - strings ``"1"`` and ``"true"`` (any case, surrounding whitespace ignored)

    Anything else, including ``None``, is treated as disabled.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in ENABLED_STRINGS
    return False


def is_explicitly_disabled_false(value: Any) -> bool:
    """Return True for a "disabled" flag that explicitly says it is not disabled."""
    if isinstance(value, bool):
        return not value
    if isinstance(value, int):
        return value == 0
    if isinstance(value, str):
        return value.strip().lower() in DISABLED_STRINGS
    return False


def status_from_flag(value: Any) -> ChainStatus:
    """Map an "enabled" flag to a status, failing closed."""
    return ChainStatus.OPEN if is_enabled(value) else ChainStatus.CLOSED


def status_from_disabled_flag(value: Any) -> ChainStatus:
    """Map an inverted "disabled" flag to a status.

    Missing or unrecognized values are closed, same as for enabled flags.
    """
    return ChainStatus.OPEN if is_explicitly_disabled_false(value) else ChainStatus.CLOSED


def text(value: Any) -> str:
    """Render an optional scalar field as text, empty when absent."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def fallback_name(name: Any, symbol: str) -> str:
    """Exchange-supplied name, falling back to the symbol."""
    rendered = text(name).strip()
    return rendered or symbol


def okx_chain_name(chain: Any) -> str:
    """OKX reports chains as ``<CHAIN>-<Network>``; keep the leading part.

    - BTC-Bitcoin -> BTC
    - USDT-ERC20 -> USDT
    """
    return text(chain).split("-")[0]
