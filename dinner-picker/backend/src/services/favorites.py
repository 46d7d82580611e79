"""Favorites persisted as one named slot in a JSON document.

The slot holds the full list of favorited records and is rewritten on every
mutation. Storage failures are logged and never surfaced: a failed load reads
as an empty list, a failed save leaves the in-memory list authoritative.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO

from loguru import logger

from errors import PersistenceError
from models import RecommendationRecord


class FavoritesStore:
    def __init__(self, path: str | Path, key: str = "dinnerAppFavorites") -> None:
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not hold a JSON object")
        return data

    def load(self) -> List[RecommendationRecord]:
        try:
            raw = self._read_document().get(self.key) or []
            if not isinstance(raw, list):
                raise PersistenceError(f"slot {self.key!r} is not a list")
            return [RecommendationRecord.from_dict(item) for item in raw]
        except (PersistenceError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Failed to load favorites from {}: {}", self.path, exc)
            return []

    @contextmanager
    def writing(self) -> Iterator[TextIO]:
        """Yield a temp file that replaces the store atomically on clean exit."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".favorites-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                yield fh
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def save(self, records: List[RecommendationRecord]) -> bool:
        try:
            try:
                document = self._read_document()
            except PersistenceError:
                # an unreadable document is overwritten rather than blocking saves
                document = {}
            document[self.key] = [r.to_dict() for r in records]
            with self.writing() as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2)
        except OSError as exc:
            logger.warning("Failed to save favorites to {}: {}", self.path, exc)
            return False
        return True


class FavoritesService:
    """In-memory favorites keyed by record id, persisted after each change."""

    def __init__(self, store: Optional[FavoritesStore] = None) -> None:
        self.store = store
        self._items: Dict[str, RecommendationRecord] = {}
        if store is not None:
            for record in store.load():
                self._items.setdefault(record.id, record)

    def list(self) -> List[RecommendationRecord]:
        return list(self._items.values())

    def contains(self, record_id: str) -> bool:
        return record_id in self._items

    def ids(self) -> set[str]:
        return set(self._items)

    def add(self, record: RecommendationRecord) -> bool:
        if record.id in self._items:
            return False
        self._items[record.id] = record
        self._persist()
        return True

    def remove(self, record_id: str) -> bool:
        if self._items.pop(record_id, None) is None:
            return False
        self._persist()
        return True

    def toggle(self, record: RecommendationRecord) -> bool:
        """Flip membership; returns True when the record is now a favorite."""
        if record.id in self._items:
            self.remove(record.id)
            return False
        self.add(record)
        return True

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.list())
