"""
Accessor resolution.

Maps an accessor name such as ``"title"`` or ``"title="`` to the operation a
Model instance performs for it. Resolution is a static lookup against the
type's SchemaRegistry, falling back to the wrapped record's own
``responds_to`` probe:

    1. objectId            -> RESERVED_FIELD
    2. declared relation   -> HAS_MANY / BELONGS_TO / RELATION
    3. declared field      -> FIELD
    4. record capability   -> PASS_THROUGH
    5. anything else       -> UNKNOWN

Resolving never touches record data; Model.dispatch executes the result.
"""

from enum import Enum
from typing import NamedTuple

from parsistence.models.schema import RESERVED_KEYS, RelationKind, SchemaRegistry
from parsistence.services.record import RemoteRecord

SETTER_MARKER = "="


class AccessorKind(str, Enum):
    """Resolved accessor kinds."""

    RESERVED_FIELD = "reserved_field"
    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"
    # Declared with declare_relation only, neither belongs_to nor has_many
    RELATION = "relation"
    FIELD = "field"
    PASS_THROUGH = "pass_through"
    UNKNOWN = "unknown"


class ResolvedAccessor(NamedTuple):
    kind: AccessorKind
    key: str
    is_setter: bool

    @property
    def resolved(self) -> bool:
        return self.kind != AccessorKind.UNKNOWN


def parse_accessor(name: str) -> tuple[str, bool]:
    """Split ``"title="`` into ``("title", True)``."""
    if name.endswith(SETTER_MARKER):
        return name[: -len(SETTER_MARKER)], True
    return name, False


def resolve(
    schema: SchemaRegistry,
    record: RemoteRecord | None,
    name: str,
    is_setter: bool | None = None,
) -> ResolvedAccessor:
    """
    Resolve an accessor name against a schema and record.

    Args:
        schema: Registry of the model type
        record: Wrapped record, probed for pass-through (None skips the probe)
        name: Accessor name, optionally ending in ``=``
        is_setter: Force setter/getter resolution; defaults to the marker

    Returns:
        ResolvedAccessor with the stripped key
    """
    key, marked = parse_accessor(name)
    setter = marked if is_setter is None else is_setter

    if key in RESERVED_KEYS:
        return ResolvedAccessor(AccessorKind.RESERVED_FIELD, key, setter)

    if key in schema.relations:
        kind = schema.relation_kind(key)
        if kind == RelationKind.HAS_MANY:
            return ResolvedAccessor(AccessorKind.HAS_MANY, key, setter)
        if kind == RelationKind.BELONGS_TO:
            return ResolvedAccessor(AccessorKind.BELONGS_TO, key, setter)
        return ResolvedAccessor(AccessorKind.RELATION, key, setter)

    if key in schema.fields:
        return ResolvedAccessor(AccessorKind.FIELD, key, setter)

    if record is not None and record.responds_to(key, setter=setter):
        return ResolvedAccessor(AccessorKind.PASS_THROUGH, key, setter)

    return ResolvedAccessor(AccessorKind.UNKNOWN, key, setter)
