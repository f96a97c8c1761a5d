"""Record backends."""

from parsistence.services.memory import (
    MemoryRecord,
    MemoryRelation,
    MemoryStore,
    get_store,
    reset_store,
)
from parsistence.services.record import RelationHandle, RemoteRecord

__all__ = [
    "RemoteRecord",
    "RelationHandle",
    "MemoryRecord",
    "MemoryRelation",
    "MemoryStore",
    "get_store",
    "reset_store",
]
