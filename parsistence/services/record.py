"""
RemoteRecord Interface
======================

The narrow capability a ``Model`` needs from the key/value object it wraps.
Persistence, querying and transport all live behind this interface; the
model layer only reads and writes keyed slots, the identity, and to-many
relation handles, and asks the record to save or delete itself.

Implementations:

    MemoryRecord  (parsistence.services.memory) - in-process store

A backend for a hosted object store only needs to subclass ``RemoteRecord``
and fill in the abstract methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RelationHandle(ABC):
    """To-many relation collection attached to a record key."""

    @abstractmethod
    def add(self, value: Any) -> Any:
        """Add a related record to the collection."""


class RemoteRecord(ABC):
    """
    Key/value record tagged with a class name.

    PASS-THROUGH PROBE
    ------------------
    ``responds_to`` tells the model dispatcher whether an accessor that is
    neither a declared field nor a relation can be forwarded to the record:

        record.responds_to("created_at")              # readable attribute?
        record.responds_to("acl", setter=True)        # settable property?

    Only public names qualify. Setters must be class-level properties with
    a setter so that arbitrary names never end up as new record attributes.
    """

    class_name: str

    @classmethod
    @abstractmethod
    def create(cls, class_name: str) -> RemoteRecord:
        """Create a fresh blank record tagged with ``class_name``."""

    @abstractmethod
    def get_object_id(self) -> str | None:
        """Read the record identity."""

    @abstractmethod
    def set_object_id(self, object_id: str | None) -> Any:
        """Assign the record identity."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Read a keyed slot. Missing slots read as None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> Any:
        """Write a keyed slot."""

    @abstractmethod
    def remove(self, key: str) -> Any:
        """Remove a keyed slot entirely."""

    @abstractmethod
    def relation_for(self, key: str) -> RelationHandle:
        """Get the to-many relation handle for ``key``."""

    @abstractmethod
    def save(self) -> bool:
        """Persist the record. Returns True on success."""

    @abstractmethod
    def delete(self) -> bool:
        """Delete the record. Returns True on success."""

    def responds_to(self, name: str, setter: bool = False) -> bool:
        """Check whether ``name`` can be forwarded to this record."""
        if not name or name.startswith("_"):
            return False
        if setter:
            attr = getattr(type(self), name, None)
            return isinstance(attr, property) and attr.fset is not None
        return hasattr(self, name)
