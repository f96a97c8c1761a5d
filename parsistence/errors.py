"""Error taxonomy for schema dispatch.

Every error here is raised synchronously to the caller of the accessor that
triggered it. Presence validation failures are never raised; they are
collected on ``Model.errors`` instead.
"""


class ParsistenceError(Exception):
    """Base class for model dispatch failures."""

    def __init__(self, message: str, name: str | None = None, model: str | None = None):
        super().__init__(message)
        self.name = name
        self.model = model


class InvalidField(ParsistenceError):
    """Raised when a field name is not declared on the model."""

    def __init__(self, name: str, model: str):
        super().__init__(f"Invalid field name {name} for object {model}", name, model)


class InvalidRelation(ParsistenceError):
    """Raised when a relation name is neither belongs_to nor has_many."""

    def __init__(self, name: str, model: str):
        super().__init__(f"Invalid relation name {name} for object {model}", name, model)


class RelationNotImplemented(ParsistenceError, NotImplementedError):
    """Raised when reading a has_many relation."""

    def __init__(self, name: str, model: str):
        super().__init__(
            f"has_many relationships aren't implemented yet ({model}.{name}). "
            "Use a regular query instead.",
            name,
            model,
        )


class NullRelationError(ParsistenceError, ValueError):
    """Raised when a has_many relation is assigned None."""

    def __init__(self, name: str, model: str):
        super().__init__(f"Can't set None for has_many relation {model}.{name}", name, model)


class UnknownAccessor(ParsistenceError, AttributeError):
    """Raised when an accessor matches no field, relation or record capability.

    Also an ``AttributeError`` so ``hasattr`` and ``getattr(obj, name, default)``
    behave as they do for ordinary objects.
    """

    def __init__(self, name: str, model: str):
        super().__init__(f"{model} has no field, relation or record attribute {name!r}", name, model)
