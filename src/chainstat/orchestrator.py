"""One end-to-end collection cycle with fallback to the last good snapshot."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from .collector import MergeEngine
from .models import Snapshot
from .store import SnapshotStore

logger = logging.getLogger(__name__)


class EmptyCollectionError(Exception):
    """Every exchange came back empty."""


class SnapshotPersistError(Exception):
    """The cycle collected data but could not save it.

    ``snapshot`` is the freshly collected result, still fit to serve.
    """

    def __init__(self, snapshot: Snapshot, cause: BaseException):
        super().__init__(f"Collected snapshot could not be saved: {cause}")
        self.snapshot = snapshot


class CollectionOrchestrator:
    """Runs collection cycles one at a time.

    This is the only component that reads or writes the persisted snapshot.
    Concurrent callers of ``run_cycle`` queue on a lock, so store writes are
    strictly ordered.
    """

    def __init__(self, engine: MergeEngine, store: SnapshotStore) -> None:
        self.engine = engine
        self.store = store
        self._lock = asyncio.Lock()

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    async def run_cycle(self) -> Snapshot:
        """Collect, persist and return a snapshot.

        Returns the previous snapshot with ``error`` set when collection fails
        or yields no tokens at all, and an empty error-flagged snapshot when
        there is nothing to fall back to.

        Raises:
            SnapshotPersistError: If the new snapshot could not be saved
        """
        async with self._lock:
            logger.info("Starting data collection")
            try:
                snapshot = await self.engine.collect()
                if not snapshot.tokens:
                    raise EmptyCollectionError("no exchange returned any token data")
            except Exception as e:
                logger.error("Error in data collection: %s", e, exc_info=not isinstance(e, EmptyCollectionError))
                return await self._fallback(str(e) or type(e).__name__)

            try:
                await asyncio.to_thread(self.store.save, snapshot)
            except OSError as e:
                logger.error("Error saving data: %s", e)
                raise SnapshotPersistError(snapshot, e) from e

            logger.info("Data collection completed: %d tokens", len(snapshot.tokens))
            return snapshot

    async def _fallback(self, message: str) -> Snapshot:
        previous = await asyncio.to_thread(self.store.load)
        if previous is not None:
            logger.info("Using last saved data due to collection error")
            return previous.model_copy(update={"error": message})

        logger.warning("No previous data to fall back to")
        return Snapshot(last_update=datetime.now(timezone.utc), tokens=[], error=message)
