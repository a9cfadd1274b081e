"""Raw exchange response archive for post-hoc inspection."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def endpoint_filename(endpoint: str) -> str:
    """``/api/v5/asset/currencies`` -> ``_api_v5_asset_currencies.json``"""
    return endpoint.replace("/", "_") + ".json"


class RawResponseArchive:
    """Best-effort store of the last raw response per exchange endpoint.

    Writes never raise: failures are logged and dropped. ``submit`` detaches
    the write from the caller; at most ``max_concurrency`` writes run at once.
    """

    def __init__(self, root: Path, max_concurrency: int = 4) -> None:
        self.root = Path(root)
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._pending: set[asyncio.Task[Path | None]] = set()

    def path_for(self, exchange_id: str, endpoint: str) -> Path:
        return self.root / exchange_id / endpoint_filename(endpoint)

    def store(self, exchange_id: str, endpoint: str, payload: Any) -> Path | None:
        """Write ``payload`` for (exchange, endpoint), overwriting the previous one."""
        path = self.path_for(exchange_id, endpoint)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(payload, str):
                content = payload
            else:
                content = json.dumps(payload, indent=2, ensure_ascii=False)
            path.write_text(content, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving raw response for %s %s: %s", exchange_id, endpoint, e)
            return None

        logger.debug("Raw response saved: %s", path)
        return path

    def submit(self, exchange_id: str, endpoint: str, payload: Any) -> asyncio.Task[Path | None]:
        """Schedule ``store`` in the background and return immediately."""
        task = asyncio.create_task(self._store_bounded(exchange_id, endpoint, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _store_bounded(self, exchange_id: str, endpoint: str, payload: Any) -> Path | None:
        async with self._semaphore:
            return await asyncio.to_thread(self.store, exchange_id, endpoint, payload)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every scheduled write to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
