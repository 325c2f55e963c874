from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from functools import lru_cache
from threading import RLock
from typing import Dict, Generator, List, Optional

from .models import CountdownEntity, StyleConfig
from .schemas import CountdownCreate, CountdownUpdate
from .settings import get_settings

logger = logging.getLogger(__name__)


def _apply_update(current: CountdownEntity, data: CountdownUpdate, now: datetime) -> CountdownEntity:
    """Return a copy of `current` with the provided fields of `data` applied."""
    updated = current.copy()
    if "title" in data.model_fields_set:
        # Explicit null or blank clears the title
        updated["title"] = data.title
    if data.target_date is not None:
        updated["target_date"] = data.target_date
    if data.style is not None:
        updated["style"] = StyleConfig.from_input(data.style, base=current["style"])
    updated["updated_at"] = now
    return updated


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for countdown storage backends."""

    name: str = "abstract"

    @abstractmethod
    def create(self, data: CountdownCreate) -> CountdownEntity:
        """Create and return a new CountdownEntity."""

    @abstractmethod
    def get(self, countdown_id: str) -> Optional[CountdownEntity]:
        """Return a CountdownEntity by id, or None if not found."""

    @abstractmethod
    def update(self, countdown_id: str, data: CountdownUpdate) -> Optional[CountdownEntity]:
        """Update fields of an existing CountdownEntity. Return updated entity or None if not found."""

    @abstractmethod
    def delete(self, countdown_id: str) -> bool:
        """Delete a CountdownEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def list(self) -> List[CountdownEntity]:
        """Return all countdowns in creation order."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        # dicts keep insertion order, which is creation order
        self._items: Dict[str, CountdownEntity] = {}

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _allocate_id(self) -> str:
        return uuid.uuid4().hex

    def _changed(self) -> None:
        """Hook called with the lock held after every mutation."""

    @contextmanager
    def _mutation(self) -> Generator[Dict[str, CountdownEntity], None, None]:
        """
        Hold the lock while the caller edits the items, then run `_changed`.
        If either step raises, the items are restored to their prior state.
        """
        with self._lock:
            snapshot = dict(self._items)
            try:
                yield self._items
                self._changed()
            except BaseException:
                self._items.clear()
                self._items.update(snapshot)
                raise

    def create(self, data: CountdownCreate) -> CountdownEntity:
        now = self._now()
        entity: CountdownEntity = {
            "id": self._allocate_id(),
            "title": data.title,
            "target_date": data.target_date,
            "style": data.style_config(),
            "created_at": now,
            "updated_at": now,
        }
        with self._mutation() as items:
            items[entity["id"]] = entity
        logger.info("Created countdown %s targeting %s", entity["id"], entity["target_date"].isoformat())
        return entity.copy()

    def get(self, countdown_id: str) -> Optional[CountdownEntity]:
        with self._lock:
            item = self._items.get(countdown_id)
            return None if item is None else item.copy()

    def update(self, countdown_id: str, data: CountdownUpdate) -> Optional[CountdownEntity]:
        with self._lock:
            existing = self._items.get(countdown_id)
            if existing is None:
                return None
            updated = _apply_update(existing, data, self._now())
            with self._mutation() as items:
                items[countdown_id] = updated
        logger.info("Updated countdown %s", countdown_id)
        return updated.copy()

    def delete(self, countdown_id: str) -> bool:
        with self._lock:
            if countdown_id not in self._items:
                return False
            with self._mutation() as items:
                del items[countdown_id]
        logger.info("Deleted countdown %s", countdown_id)
        return True

    def list(self) -> List[CountdownEntity]:
        with self._lock:
            # Return copies to avoid external mutation
            return [t.copy() for t in self._items.values()]


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the process-wide repository configured by settings.
    - memory: InMemoryRepository
    - json: JsonFileRepository backed by settings.data_file
    """
    settings = get_settings()
    if settings.persistence_backend == "memory":
        return InMemoryRepository()
    from .json_store import JsonFileRepository

    return JsonFileRepository(settings.data_file)
