"""Persistence of the last good snapshot."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from .models import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    def load(self) -> Snapshot | None:
        """Return the last saved snapshot, or None when there is none."""
        ...

    def save(self, snapshot: Snapshot) -> None:
        """Persist ``snapshot``, raising ``OSError`` on failure."""
        ...


class JsonSnapshotStore:
    """Keeps the snapshot in a single JSON file.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so a reader sees either the old or the new
    document, never a partial one.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Snapshot | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("No previous data found at %s", self.path)
            return None
        except UnicodeDecodeError as e:
            logger.warning("Ignoring undecodable snapshot at %s: %s", self.path, e)
            return None
        except OSError as e:
            logger.warning("Error reading previous data from %s: %s", self.path, e)
            return None

        try:
            return Snapshot.from_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring unreadable snapshot at %s: %s", self.path, e)
            return None

    def save(self, snapshot: Snapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.to_json())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("Data saved to %s (%d tokens)", self.path, len(snapshot.tokens))
