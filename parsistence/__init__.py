"""Parsistence - typed models over key/value remote records."""

__version__ = "0.1.0"

from parsistence.errors import (
    InvalidField,
    InvalidRelation,
    NullRelationError,
    ParsistenceError,
    RelationNotImplemented,
    UnknownAccessor,
)
from parsistence.models.model import Model
from parsistence.models.schema import RelationKind, RelationOptions, SchemaRegistry
from parsistence.services.memory import MemoryRecord, MemoryStore, get_store
from parsistence.services.record import RelationHandle, RemoteRecord

__all__ = [
    "Model",
    "SchemaRegistry",
    "RelationKind",
    "RelationOptions",
    "RemoteRecord",
    "RelationHandle",
    "MemoryRecord",
    "MemoryStore",
    "get_store",
    "ParsistenceError",
    "InvalidField",
    "InvalidRelation",
    "RelationNotImplemented",
    "NullRelationError",
    "UnknownAccessor",
]
