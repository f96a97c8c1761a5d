"""
Model Base Class
================

A Model wraps exactly one RemoteRecord and turns attribute access into
typed operations on it, driven by the declarations in its SchemaRegistry.

DECLARING A MODEL
-----------------
Declarations can be written in the class body; they are consumed when the
class is created and removed from the class namespace:

    class Note(Model):
        fields = ["title", "body"]
        belongs_to = ["author"]
        has_many = {"tags": {"class_name": "Tag"}}
        validates_presence_of = {"title": None}

or added incrementally afterwards:

    Note.declare_field("summary")
    Note.declare_presence("body", "Write something")

Each subclass owns its own registry. Declarations are not inherited.

ATTRIBUTE DISPATCH
------------------
Reads that find nothing on the class go through ``__getattr__``; writes to
public names the class does not define go through ``__setattr__``. Both end
up in ``dispatch()``, which resolves the name (see models/dispatch.py) and
performs the field, relation, identity or pass-through operation:

    note = Note(title="Hi")
    note.title                 # get_field("title")
    note.author = user         # set_relation("author", user.record)
    note.objectId              # record.get_object_id()
    note.created_at            # forwarded to the record
    note.nope                  # UnknownAccessor (an AttributeError)

LIFECYCLE
---------
save() runs before_save, validate, record.save and after_save; delete()
runs before_delete, record.delete and after_delete. A before hook aborts
only by returning the literal ``False``.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

from loguru import logger

from parsistence.errors import (
    InvalidField,
    InvalidRelation,
    NullRelationError,
    RelationNotImplemented,
    UnknownAccessor,
)
from parsistence.models.dispatch import AccessorKind, ResolvedAccessor, resolve
from parsistence.models.schema import RESERVED_KEYS, SchemaRegistry
from parsistence.services.memory import MemoryRecord
from parsistence.services.record import RemoteRecord
from parsistence.settings import settings

# Class-body shorthand consumed by __init_subclass__
DECLARATION_ATTRS = ("fields", "relations", "belongs_to", "has_many", "validates_presence_of")

_schema_lock = threading.Lock()


def _named(value: Any) -> dict[str, Any]:
    """Normalize a list of names or a name -> option mapping."""
    if isinstance(value, str):
        return {value: None}
    if isinstance(value, Mapping):
        return dict(value)
    return {name: None for name in value}


class Model:
    """Typed domain model over a RemoteRecord."""

    # Backend used when an instance is created without a record
    record_class: type[RemoteRecord] = MemoryRecord

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        declarations = {}
        for attr in DECLARATION_ATTRS:
            if attr in cls.__dict__:
                declarations[attr] = cls.__dict__[attr]
                delattr(cls, attr)
        if not declarations:
            return

        schema = cls.schema()
        for name in _named(declarations.get("fields", ())):
            schema.declare_field(name)
        for name in _named(declarations.get("relations", ())):
            schema.declare_relation(name)
        for name, options in _named(declarations.get("belongs_to", ())).items():
            schema.declare_belongs_to(name, options)
        for name, options in _named(declarations.get("has_many", ())).items():
            schema.declare_has_many(name, options)
        for name, message in _named(declarations.get("validates_presence_of", ())).items():
            schema.declare_presence(name, message)

    def __init__(self, record: RemoteRecord | None = None, **attributes: Any):
        """
        Wrap ``record``, or a fresh record tagged with the class name.

        Keyword arguments are applied with write_attributes().
        """
        if record is None:
            record = self.record_class.create(type(self).__name__)
        self._record = record
        self._errors: dict[str, str] = {}
        if attributes:
            self.write_attributes(attributes)

    # =========================================================================
    # Schema
    # =========================================================================

    @classmethod
    def schema(cls) -> SchemaRegistry:
        """The registry of this exact class, created on first use."""
        registry = cls.__dict__.get("_schema")
        if registry is None:
            with _schema_lock:
                registry = cls.__dict__.get("_schema")
                if registry is None:
                    registry = SchemaRegistry(cls.__name__)
                    cls._schema = registry
        return registry

    @classmethod
    def declare_field(cls, *names: str) -> None:
        for name in names:
            cls.schema().declare_field(name)

    @classmethod
    def declare_relation(cls, *names: str) -> None:
        for name in names:
            cls.schema().declare_relation(name)

    @classmethod
    def declare_belongs_to(cls, name: str, **options: Any) -> None:
        cls.schema().declare_belongs_to(name, options)

    @classmethod
    def declare_has_many(cls, name: str, **options: Any) -> None:
        cls.schema().declare_has_many(name, options)

    @classmethod
    def declare_presence(cls, name: str, message: str | None = None) -> None:
        cls.schema().declare_presence(name, message)

    @property
    def record(self) -> RemoteRecord:
        return self._record

    @property
    def model_name(self) -> str:
        return type(self).__name__

    # =========================================================================
    # Dispatch
    # =========================================================================

    def __getattr__(self, name: str) -> Any:
        # Private and dunder lookups never reach the record
        if name.startswith("_"):
            raise AttributeError(name)
        return self.dispatch(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
            return
        self.dispatch(f"{name}=", value)

    def resolve(self, name: str) -> ResolvedAccessor:
        return resolve(self.schema(), self._record, name)

    def responds_to(self, name: str) -> bool:
        """Whether ``name`` (optionally ending in ``=``) would resolve."""
        return self.resolve(name).resolved

    def dispatch(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Perform the operation an accessor name resolves to.

        Args:
            name: Accessor name; a trailing ``=`` makes it a setter
            *args: Setter value, or arguments for a forwarded record method
            **kwargs: Keyword arguments for a forwarded record method

        Raises:
            UnknownAccessor: If nothing matches ``name``
        """
        accessor = self.resolve(name)
        key = accessor.key
        value = args[0] if args else None

        if accessor.kind == AccessorKind.RESERVED_FIELD:
            if accessor.is_setter:
                return self._record.set_object_id(*args)
            return self._record.get_object_id()

        if accessor.kind in (AccessorKind.HAS_MANY, AccessorKind.BELONGS_TO, AccessorKind.RELATION):
            if accessor.is_setter:
                return self.set_relation(key, value)
            return self.get_relation(key)

        if accessor.kind == AccessorKind.FIELD:
            if accessor.is_setter:
                return self.set_field(key, value)
            return self.get_field(key)

        if accessor.kind == AccessorKind.PASS_THROUGH:
            logger.debug(f"Forwarding {self.model_name}.{name} to {type(self._record).__name__}")
            if accessor.is_setter:
                setattr(self._record, key, value)
                return value
            attr = getattr(self._record, key)
            if args or kwargs:
                return attr(*args, **kwargs)
            return attr

        raise UnknownAccessor(name, self.model_name)

    # =========================================================================
    # Fields and relations
    # =========================================================================

    def get_field(self, key: str) -> Any:
        if key in RESERVED_KEYS:
            return self._record.get_object_id()
        if self.schema().is_storage_key(key):
            return self._record.get(key)
        raise InvalidField(key, self.model_name)

    def set_field(self, key: str, value: Any) -> Any:
        """Write a declared field. ``None`` removes the slot entirely."""
        if key in RESERVED_KEYS or self.schema().is_storage_key(key):
            if value is None:
                return self._record.remove(key)
            if key in RESERVED_KEYS:
                return self._record.set_object_id(value)
            return self._record.set(key, value)
        raise InvalidField(key, self.model_name)

    def get_relation(self, key: str) -> Any:
        schema = self.schema()
        if key in schema.has_many:
            raise RelationNotImplemented(key, self.model_name)
        if key in schema.belongs_to:
            return self.get_field(key)
        raise InvalidRelation(key, self.model_name)

    def set_relation(self, key: str, value: Any) -> Any:
        """
        Write a relation. Model values are unwrapped to their record.

        has_many relations add ``value`` to the record's relation handle;
        belongs_to relations are stored like fields.
        """
        if isinstance(value, Model):
            value = value.record

        schema = self.schema()
        if key in schema.has_many:
            if value is None:
                raise NullRelationError(key, self.model_name)
            return self._record.relation_for(key).add(value)
        if key in schema.belongs_to:
            return self.set_field(key, value)
        raise InvalidRelation(key, self.model_name)

    def read_attributes(self) -> dict[str, Any]:
        """Snapshot of every declared field."""
        return {field: self.get_field(field) for field in self.schema().fields}

    def write_attributes(self, attrs: Mapping[str, Any]) -> Mapping[str, Any]:
        """
        Apply a mapping of attributes.

        Nested mappings are applied to this same model rather than stored.
        Keys with a property setter or a resolvable setter are assigned as
        attributes; anything else goes through set_field, so undeclared keys
        raise InvalidField.
        """
        for key, value in attrs.items():
            if isinstance(value, Mapping) and not isinstance(value, RemoteRecord):
                self.write_attributes(value)
            elif key is None:
                continue
            elif self._has_setter(key):
                setattr(self, key, value)
            else:
                self.set_field(key, value)
        return attrs

    def _has_setter(self, key: Any) -> bool:
        if not isinstance(key, str):
            return False
        attr = getattr(type(self), key, None)
        if isinstance(attr, property):
            return attr.fset is not None
        return attr is None and self.responds_to(f"{key}=")

    @property
    def attributes(self) -> dict[str, Any]:
        return self.read_attributes()

    @attributes.setter
    def attributes(self, attrs: Mapping[str, Any]) -> None:
        self.write_attributes(attrs)

    # =========================================================================
    # Validation
    # =========================================================================

    @property
    def errors(self) -> dict[str, str]:
        """Errors from the most recent validate() call."""
        return self._errors

    def validate(self) -> dict[str, str]:
        self._errors = {}
        for field, value in self.read_attributes().items():
            self.validate_field(field, value)
        if self._errors:
            logger.debug(f"{self.model_name} failed validation: {self._errors}")
        return self._errors

    def validate_field(self, field: str, value: Any) -> None:
        schema = self.schema()
        if field in schema.presence_rules and (value is None or value == ""):
            messages = schema.presence_messages
            if field in messages:
                self._errors[field] = messages[field]
            else:
                self._errors[field] = settings.validation.message_for(field)

    def is_valid(self) -> bool:
        """Re-run validation. Mutates ``errors``."""
        self.validate()
        return not self._errors

    def error_for(self, field: str) -> str | bool:
        return self._errors.get(field, False)

    @property
    def valid(self) -> bool:
        return not self._errors

    @property
    def invalid(self) -> bool:
        return not self.valid

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def save(self) -> bool:
        """
        Validate and persist the record.

        Returns False without touching the record when before_save returns
        False or validation fails. after_save runs only after a successful
        record save.
        """
        if self.before_save() is False:
            logger.warning(f"before_save aborted save of {self!r}")
            return False

        self.validate()
        if self._errors:
            return False

        saved = self._record.save()
        if saved:
            logger.info(f"Saved {self.model_name} {self._record.get_object_id()}")
            self.after_save()
        return saved

    def before_save(self) -> Any:
        pass

    def after_save(self) -> Any:
        pass

    def delete(self) -> bool:
        if self.before_delete() is False:
            logger.warning(f"before_delete aborted delete of {self!r}")
            return False

        deleted = self._record.delete()
        if deleted:
            logger.info(f"Deleted {self.model_name} {self._record.get_object_id()}")
            self.after_delete()
        return deleted

    def before_delete(self) -> Any:
        pass

    def after_delete(self) -> Any:
        pass

    def __repr__(self) -> str:
        return f"<{self.model_name} objectId={self._record.get_object_id()!r}>"
