from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .models import CountdownEntity, StyleConfig
from .repositories import InMemoryRepository

logger = logging.getLogger(__name__)


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    s = value[:-1] + "+00:00" if value.endswith("Z") else value
    parsed = datetime.fromisoformat(s)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _entity_to_record(entity: CountdownEntity) -> Dict[str, Any]:
    return {
        "id": entity["id"],
        "title": entity["title"],
        "targetDate": entity["target_date"].isoformat(),
        "style": entity["style"].to_dict(),
        "createdAt": entity["created_at"].isoformat(),
        "updatedAt": entity["updated_at"].isoformat(),
    }


def _record_to_entity(record: Dict[str, Any]) -> CountdownEntity:
    target = _parse_dt(record.get("targetDate"))
    if target is None:
        raise ValueError(f"countdown {record.get('id')!r} has no targetDate")
    created = _parse_dt(record.get("createdAt")) or datetime.now(timezone.utc)
    title = record.get("title")
    return {
        "id": str(record["id"]),
        "title": title if isinstance(title, str) and title.strip() else None,
        "target_date": target,
        "style": StyleConfig.from_input(record.get("style")),
        "created_at": created,
        "updated_at": _parse_dt(record.get("updatedAt")) or created,
    }


class JsonFileRepository(InMemoryRepository):
    """
    In-memory repository persisted to a single JSON file.

    The whole collection is loaded on construction and rewritten after each
    mutation. A missing file starts an empty store; an unreadable one raises.
    """

    name = "json"

    def __init__(self, data_file: str) -> None:
        super().__init__()
        self._data_file = data_file
        for entity in self._load():
            self._items[entity["id"]] = entity

    @property
    def data_file(self) -> str:
        return self._data_file

    def _load(self) -> List[CountdownEntity]:
        if not os.path.exists(self._data_file):
            logger.info("No data file at %s, starting with an empty store", self._data_file)
            return []
        with open(self._data_file, "r", encoding="utf-8") as f:
            records = json.load(f)
        if not isinstance(records, list):
            raise ValueError(f"{self._data_file} must contain a JSON array of countdowns")
        entities = [_record_to_entity(r) for r in records]
        logger.info("Loaded %d countdowns from %s", len(entities), self._data_file)
        return entities

    def _changed(self) -> None:
        records = [_entity_to_record(e) for e in self._items.values()]
        directory = os.path.dirname(self._data_file) or "."
        os.makedirs(directory, exist_ok=True)
        # Write to a sibling temp file then swap, so readers never see a partial file
        fd, tmp_path = tempfile.mkstemp(prefix=".countdowns-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._data_file)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug("Saved %d countdowns to %s", len(records), self._data_file)
