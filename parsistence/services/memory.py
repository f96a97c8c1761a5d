"""
In-process RemoteRecord backend.

MemoryStore keeps one table per class name, each mapping object ids to a
snapshot of the record taken at save time. Records read back from the store
are fresh MemoryRecord instances, so mutating a fetched record never touches
the stored snapshot until it is saved again.

    record = MemoryRecord.create("Note")
    record.set("title", "Hi")
    record.save()                                    # assigns objectId
    same = get_store().fetch("Note", record.get_object_id())

Like the database service it stands in for, the store is a lazily created
singleton; records accept an explicit store for tests.
"""

from __future__ import annotations

import secrets
import string
import threading
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from parsistence.services.record import RelationHandle, RemoteRecord
from parsistence.settings import settings

OBJECT_ID_ALPHABET = string.ascii_letters + string.digits


def generate_object_id(length: int | None = None) -> str:
    """Random alphanumeric object id."""
    length = length or settings.store.object_id_length
    return "".join(secrets.choice(OBJECT_ID_ALPHABET) for _ in range(length))


class MemoryRelation(RelationHandle):
    """De-duplicated list of related records."""

    def __init__(self, key: str, objects: list[Any] | None = None):
        self.key = key
        self._objects: list[Any] = list(objects or [])

    def add(self, value: Any) -> bool:
        """Add a related record. Returns False if it was already present."""
        if any(existing is value for existing in self._objects):
            return False
        self._objects.append(value)
        return True

    def remove(self, value: Any) -> bool:
        for i, existing in enumerate(self._objects):
            if existing is value:
                del self._objects[i]
                return True
        return False

    @property
    def objects(self) -> list[Any]:
        return list(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self):
        return iter(self.objects)


class MemoryRecord(RemoteRecord):
    """Dict-backed record persisted to a MemoryStore."""

    def __init__(
        self,
        class_name: str,
        data: dict[str, Any] | None = None,
        object_id: str | None = None,
        store: MemoryStore | None = None,
    ):
        self.class_name = class_name
        self._data: dict[str, Any] = dict(data or {})
        self._object_id = object_id
        self._relations: dict[str, MemoryRelation] = {}
        self._created_at: datetime | None = None
        self._updated_at: datetime | None = None
        self._store = store

    @classmethod
    def create(cls, class_name: str) -> MemoryRecord:
        return cls(class_name)

    @property
    def store(self) -> MemoryStore:
        """Explicit store if given, otherwise the process singleton."""
        if self._store is not None:
            return self._store
        return get_store()

    # Identity

    def get_object_id(self) -> str | None:
        return self._object_id

    def set_object_id(self, object_id: str | None) -> str | None:
        self._object_id = object_id
        return object_id

    @property
    def created_at(self) -> datetime | None:
        return self._created_at

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    # Keyed storage

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> Any:
        self._data[key] = value
        return value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def to_dict(self) -> dict[str, Any]:
        """Keyed slots plus identity and timestamps."""
        data = dict(self._data)
        data["objectId"] = self._object_id
        data["createdAt"] = self._created_at
        data["updatedAt"] = self._updated_at
        return data

    def relation_for(self, key: str) -> MemoryRelation:
        if key not in self._relations:
            self._relations[key] = MemoryRelation(key)
        return self._relations[key]

    # Persistence

    def save(self) -> bool:
        now = datetime.now(timezone.utc)
        if self._object_id is None:
            self._object_id = generate_object_id()
        if self._created_at is None:
            self._created_at = now
        self._updated_at = now
        self.store.put(self)
        return True

    def delete(self) -> bool:
        if self._object_id is None:
            return False
        return self.store.remove(self.class_name, self._object_id)

    def __repr__(self) -> str:
        return f"<MemoryRecord {self.class_name} objectId={self._object_id!r}>"


class MemoryStore:
    """Thread-safe table of record snapshots keyed by class name and object id."""

    def __init__(self):
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def put(self, record: MemoryRecord) -> None:
        """Store a snapshot of ``record``. The record must have an object id."""
        object_id = record.get_object_id()
        if object_id is None:
            raise ValueError(f"Cannot store {record.class_name} record without objectId")
        snapshot = {
            "data": dict(record._data),
            "relations": {key: rel.objects for key, rel in record._relations.items()},
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }
        with self._lock:
            table = self._tables.setdefault(record.class_name, {})
            existing = object_id in table
            table[object_id] = snapshot
        logger.debug(f"{'Updated' if existing else 'Stored'} {record.class_name} {object_id}")

    def fetch(self, class_name: str, object_id: str) -> MemoryRecord | None:
        """Get a fresh record for ``object_id``, or None."""
        with self._lock:
            snapshot = self._tables.get(class_name, {}).get(object_id)
        if snapshot is None:
            return None
        return self._materialize(class_name, object_id, snapshot)

    def find(self, class_name: str, filters: dict[str, Any] | None = None) -> list[MemoryRecord]:
        """
        Find records whose slots equal every filter value.

        ``objectId`` filters match the identity rather than a slot.
        Results keep insertion order.
        """
        filters = filters or {}
        with self._lock:
            rows = list(self._tables.get(class_name, {}).items())

        results = []
        for object_id, snapshot in rows:
            data = snapshot["data"]
            matches = True
            for key, value in filters.items():
                actual = object_id if key == "objectId" else data.get(key)
                if actual != value:
                    matches = False
                    break
            if matches:
                results.append(self._materialize(class_name, object_id, snapshot))
        return results

    def remove(self, class_name: str, object_id: str) -> bool:
        """Hard delete. Returns False if the record was not stored."""
        with self._lock:
            table = self._tables.get(class_name, {})
            if object_id not in table:
                return False
            del table[object_id]
        logger.debug(f"Removed {class_name} {object_id}")
        return True

    def count(self, class_name: str) -> int:
        with self._lock:
            return len(self._tables.get(class_name, {}))

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()

    def _materialize(self, class_name: str, object_id: str, snapshot: dict[str, Any]) -> MemoryRecord:
        record = MemoryRecord(class_name, snapshot["data"], object_id=object_id, store=self)
        record._created_at = snapshot["created_at"]
        record._updated_at = snapshot["updated_at"]
        for key, objects in snapshot["relations"].items():
            record._relations[key] = MemoryRelation(key, objects)
        return record


# Singleton instance
_store: MemoryStore | None = None


def get_store() -> MemoryStore:
    """Get or create the record store singleton."""
    global _store
    if _store is None:
        _store = MemoryStore()
    return _store


def reset_store() -> None:
    """Drop the singleton so the next get_store() starts empty."""
    global _store
    _store = None
