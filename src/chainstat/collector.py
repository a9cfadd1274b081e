"""Concurrent collection from every exchange and merge into one snapshot."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Sequence

from .exchanges.protocol import ExchangeAdapter
from .models import Snapshot, TokenRecord

logger = logging.getLogger(__name__)


def merge_tokens(token_lists: Sequence[Sequence[TokenRecord]]) -> list[TokenRecord]:
    """Merge per-exchange token lists in the given (priority) order.

    - Tokens are keyed by symbol exactly as emitted; first-seen order is kept.
    - Exchange entries are appended verbatim, never deduplicated.
    - The first non-empty display name wins.
    """
    merged: dict[str, TokenRecord] = {}

    for tokens in token_lists:
        for token in tokens:
            aggregate = merged.get(token.symbol)
            if aggregate is None:
                aggregate = TokenRecord(symbol=token.symbol, name=token.name)
                merged[token.symbol] = aggregate
            elif not aggregate.name and token.name:
                aggregate.name = token.name

            aggregate.exchanges.extend(entry.model_copy(deep=True) for entry in token.exchanges)

    return list(merged.values())


class MergeEngine:
    """Fans out to every adapter and combines their results.

    Adapters are expected to fail closed. If one raises anyway, the remaining
    adapters still run to completion before the error is re-raised.
    """

    def __init__(self, adapters: Sequence[ExchangeAdapter]) -> None:
        self.adapters = list(adapters)

    async def collect(self) -> Snapshot:
        results = await asyncio.gather(
            *(adapter.fetch() for adapter in self.adapters),
            return_exceptions=True,
        )

        token_lists: list[list[TokenRecord]] = []
        failure: BaseException | None = None
        for adapter, result in zip(self.adapters, results):
            if isinstance(result, BaseException):
                logger.error("Adapter %s raised: %r", adapter.name, result)
                failure = failure or result
                continue
            logger.debug("%s contributed %d tokens", adapter.name, len(result))
            token_lists.append(result)

        if failure is not None:
            raise failure

        tokens = merge_tokens(token_lists)
        return Snapshot(last_update=datetime.now(timezone.utc), tokens=tokens)

    async def close(self) -> None:
        for adapter in self.adapters:
            await adapter.close()
