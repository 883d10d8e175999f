"""
Notified-set persistent storage.

Holds the serial numbers that already received a replacement notification.
The file store keeps them as a single JSON array that is read at check time
and overwritten wholesale on change.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


class NotifiedStoreError(Exception):
    """Raised when the notified set cannot be read or written."""
    pass


class NotifiedStore(ABC):
    """Base class for notified-set storage."""

    @abstractmethod
    def load(self) -> List[str]:
        """
        Load notified serials.

        Returns:
            Serials in the order they were notified

        Raises:
            NotifiedStoreError: If the stored set cannot be read
        """
        pass

    @abstractmethod
    def save(self, serials: Iterable[str]) -> None:
        """
        Replace the stored set.

        Args:
            serials: Complete list of notified serials

        Raises:
            NotifiedStoreError: If the set cannot be written
        """
        pass


class JsonFileNotifiedStore(NotifiedStore):
    """
    Notified set stored as a JSON array in a flat file.

    A missing file is an empty set. There is no locking; overlapping
    writers can lose an update.
    """

    def __init__(self, path: str = "notified.json"):
        """
        Initialize file store.

        Args:
            path: Path to the JSON file
        """
        self.path = Path(path)

    def load(self) -> List[str]:
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise NotifiedStoreError(f"Error reading {self.path}: {e}") from e

        if not isinstance(data, list):
            raise NotifiedStoreError(
                f"Expected a JSON array in {self.path}, got {type(data).__name__}"
            )
        return [str(serial) for serial in data]

    def save(self, serials: Iterable[str]) -> None:
        serials = list(serials)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(serials, indent=2), encoding="utf-8")
        except OSError as e:
            raise NotifiedStoreError(f"Error writing {self.path}: {e}") from e

        logger.debug(f"Saved {len(serials)} notified serials to {self.path}")


class InMemoryNotifiedStore(NotifiedStore):
    """Notified set kept in process memory."""

    def __init__(self, serials: Iterable[str] = ()):
        self.serials: List[str] = list(serials)
        self.save_count = 0

    def load(self) -> List[str]:
        return list(self.serials)

    def save(self, serials: Iterable[str]) -> None:
        self.serials = list(serials)
        self.save_count += 1
