"""
Schema Registry
===============

One SchemaRegistry per Model subclass. It is filled in by declaration calls
while the class is being defined and only read afterwards:

    schema = SchemaRegistry("Note")
    schema.declare_field("title")          # fields: objectId, title
    schema.declare_belongs_to("author")    # relations: author
    schema.declare_presence("title", "A note needs a title")

Declarations are idempotent: repeating a name never produces a duplicate.
Readers return copies, so callers cannot mutate the registry through them.
"""

import re
import threading
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

RESERVED_FIELD = "objectId"
RESERVED_KEYS = (RESERVED_FIELD,)


class RelationKind(str, Enum):
    """Declared relation kinds."""

    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"


def infer_class_name(name: str) -> str:
    """Target type hint from a relation name: ``blog_post`` -> ``BlogPost``."""
    parts = [p for p in re.split(r"[_\s]+", name) if p]
    return "".join(p[:1].upper() + p[1:] for p in parts)


class RelationOptions(BaseModel):
    """Per-relation options. Unknown keys are kept as extras."""

    model_config = ConfigDict(extra="allow")

    class_name: str | None = None


class SchemaRegistry:
    """Declared fields, relations and presence rules of one model type."""

    def __init__(self, model_name: str):
        self.model_name = model_name
        self._fields: list[str] = []
        self._relations: list[str] = []
        self._belongs_to: dict[str, RelationOptions] = {}
        self._has_many: dict[str, RelationOptions] = {}
        self._presence_rules: list[str] = []
        self._presence_messages: dict[str, str] = {}
        self._lock = threading.Lock()

    # Declarations

    def declare_field(self, name: str) -> None:
        with self._lock:
            if RESERVED_FIELD not in self._fields:
                self._fields.insert(0, RESERVED_FIELD)
            if name not in self._fields:
                self._fields.append(name)

    def declare_relation(self, name: str) -> None:
        with self._lock:
            if name not in self._relations:
                self._relations.append(name)

    def declare_belongs_to(self, name: str, options: dict[str, Any] | RelationOptions | None = None) -> None:
        self.declare_relation(name)
        opts = self._build_options(name, options)
        with self._lock:
            self._belongs_to[name] = opts

    def declare_has_many(self, name: str, options: dict[str, Any] | RelationOptions | None = None) -> None:
        self.declare_relation(name)
        opts = self._build_options(name, options)
        with self._lock:
            self._has_many[name] = opts

    def declare_presence(self, name: str, message: str | None = None) -> None:
        with self._lock:
            if name not in self._presence_rules:
                self._presence_rules.append(name)
            if message is not None:
                self._presence_messages[name] = message

    @staticmethod
    def _build_options(name: str, options: dict[str, Any] | RelationOptions | None) -> RelationOptions:
        if isinstance(options, RelationOptions):
            opts = options.model_copy()
        else:
            opts = RelationOptions.model_validate(options or {})
        if not opts.class_name:
            opts.class_name = infer_class_name(name)
        return opts

    # Readers

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._fields)

    @property
    def relations(self) -> tuple[str, ...]:
        return tuple(self._relations)

    @property
    def belongs_to(self) -> dict[str, RelationOptions]:
        return dict(self._belongs_to)

    @property
    def has_many(self) -> dict[str, RelationOptions]:
        return dict(self._has_many)

    @property
    def presence_rules(self) -> tuple[str, ...]:
        return tuple(self._presence_rules)

    @property
    def presence_messages(self) -> dict[str, str]:
        return dict(self._presence_messages)

    def relation_options(self, name: str) -> RelationOptions | None:
        return self._belongs_to.get(name) or self._has_many.get(name)

    def relation_kind(self, name: str) -> RelationKind | None:
        if name in self._has_many:
            return RelationKind.HAS_MANY
        if name in self._belongs_to:
            return RelationKind.BELONGS_TO
        return None

    def is_storage_key(self, name: str) -> bool:
        """Declared fields and belongs_to relations live in keyed slots."""
        return name in self._fields or name in self._belongs_to

    def __repr__(self) -> str:
        return (
            f"SchemaRegistry({self.model_name!r}, fields={list(self._fields)}, "
            f"relations={list(self._relations)})"
        )
