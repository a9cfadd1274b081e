from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from .archive import RawResponseArchive
from .collector import MergeEngine
from .exchanges.factory import create_adapters_from_settings
from .exchanges.protocol import ExchangeAdapter
from .exchanges.signing import Signer
from .orchestrator import CollectionOrchestrator
from .store import JsonSnapshotStore, SnapshotStore

if TYPE_CHECKING:
    from .settings import Settings


@dataclass(slots=True)
class AppContainer:
    settings: "Settings"
    store: SnapshotStore
    engine: MergeEngine
    orchestrator: CollectionOrchestrator
    archive: RawResponseArchive | None = None
    shutdown: asyncio.Event = field(default_factory=asyncio.Event)

    async def aclose(self) -> None:
        """Flush archive writes and close adapter sessions."""
        if self.archive is not None:
            await self.archive.drain()
        await self.engine.close()


def build_container(
    settings: "Settings",
    adapters: Sequence[ExchangeAdapter] | None = None,
    store: SnapshotStore | None = None,
) -> AppContainer:
    """Build application container, creating adapters from settings unless given."""
    archive = None
    if settings.collector.archive_enabled:
        archive = RawResponseArchive(
            settings.raw_responses_dir,
            max_concurrency=settings.collector.archive_max_concurrency,
        )

    if adapters is None:
        signer = Signer(settings.credentials_by_exchange())
        adapters = create_adapters_from_settings(settings, signer, archive)

    store = store or JsonSnapshotStore(settings.snapshot_path)
    engine = MergeEngine(adapters)
    return AppContainer(
        settings=settings,
        store=store,
        engine=engine,
        orchestrator=CollectionOrchestrator(engine, store),
        archive=archive,
    )
