"""chainstat: deposit/withdraw availability across crypto exchanges."""

from .settings import Settings
from .models import ChainEntry, ChainStatus, ExchangeEntry, Snapshot, TokenRecord
from .orchestrator import CollectionOrchestrator, EmptyCollectionError, SnapshotPersistError

__all__ = [
    "Settings",
    "ChainEntry",
    "ChainStatus",
    "ExchangeEntry",
    "Snapshot",
    "TokenRecord",
    "CollectionOrchestrator",
    "EmptyCollectionError",
    "SnapshotPersistError",
]
