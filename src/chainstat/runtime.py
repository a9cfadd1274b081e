from __future__ import annotations

import asyncio
import logging

from .di import AppContainer
from .orchestrator import SnapshotPersistError

logger = logging.getLogger(__name__)


async def run_scheduled_cycle(container: AppContainer) -> None:
    """Run one cycle, logging instead of raising."""
    try:
        snapshot = await container.orchestrator.run_cycle()
    except SnapshotPersistError as e:
        logger.error("Collected %d tokens but could not persist them: %s", len(e.snapshot.tokens), e)
        return
    except Exception:
        logger.exception("Data collection cycle failed")
        return

    if snapshot.error:
        logger.warning("Serving fallback data from %s: %s", snapshot.last_update.isoformat(), snapshot.error)


async def run(container: AppContainer) -> None:
    """Collect once at start, then every refresh interval until shutdown."""
    interval = container.settings.collector.refresh_interval_seconds
    logger.info("runtime starting (refresh every %ss)", interval)
    logger.debug("settings=%s", container.settings.redacted())

    try:
        while not container.shutdown.is_set():
            await run_scheduled_cycle(container)
            try:
                await asyncio.wait_for(container.shutdown.wait(), timeout=interval)
            except asyncio.TimeoutError:
                logger.info("Running scheduled data collection")
    finally:
        await container.aclose()
        logger.info("runtime stopped")
