"""Parsistence models."""

from parsistence.models.dispatch import AccessorKind, ResolvedAccessor, resolve
from parsistence.models.model import Model
from parsistence.models.schema import (
    RESERVED_FIELD,
    RelationKind,
    RelationOptions,
    SchemaRegistry,
)

__all__ = [
    "Model",
    "SchemaRegistry",
    "RelationKind",
    "RelationOptions",
    "RESERVED_FIELD",
    "AccessorKind",
    "ResolvedAccessor",
    "resolve",
]
