"""
Relation objects returned by model relation methods.

A relation method is a zero-argument model method returning one of these,
e.g.::

    class Post(Base, RelationsMixin):
        def comments(self) -> MorphMany:
            return self.morph_many(Comment, 'commentable')

A relation knows its related class and builds a ``select()`` for the related
rows of its parent instance; ``get()`` executes it and returns a list.
"""

import re
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from ..exceptions import NoSessionError
from ..session import current_session
from .kinds import RelationKind


def _check_methods(C, *names):
    for name in names:
        for B in C.__mro__:
            if name in B.__dict__:
                if B.__dict__[name] is None:
                    return NotImplemented
                break
        else:
            return NotImplemented
    return True


def snake_case(name: str) -> str:
    """'ParentModel' -> 'parent_model'"""
    name = re.sub(r'(.)([A-Z][a-z]+)', r'\1_\2', name)
    return re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name).lower()


def primary_key_name(cls) -> str:
    """Attribute name of the (first) primary key column of a mapped class."""
    mapper = sa_inspect(cls)
    column = mapper.primary_key[0]
    return mapper.get_property_by_column(column).key


def resolve_session(instance) -> Session:
    """
    Session for running queries on behalf of ``instance``.

    Persistent instances use their own session; transient ones use the
    session bound with ``modelcheck.session.bind_session()``.
    """
    session = Session.object_session(instance) or current_session()
    if session is None:
        raise NoSessionError(f"No database session bound for {type(instance).__name__}")
    return session


class Relation(ABC):
    """
    Capability of a relation: fetch all related rows, name the related class.

    Any class defining ``get`` and ``related_class`` satisfies the capability,
    whether or not it inherits from Relation.
    """

    kind: Optional[RelationKind] = None

    @abstractmethod
    def get(self) -> list:
        """Fetch all related rows."""

    @property
    @abstractmethod
    def related_class(self) -> type:
        """The related model class."""

    @classmethod
    def __subclasshook__(cls, C):
        if cls is Relation:
            return _check_methods(C, 'get', 'related_class')
        return NotImplemented


class SQLRelation(Relation):
    """Relation executed as a SQLAlchemy select() on the parent's session."""

    def __init__(self, parent, related: type):
        self.parent = parent
        self.related = related

    @property
    def related_class(self) -> type:
        return self.related

    @property
    def session(self) -> Session:
        return resolve_session(self.parent)

    @abstractmethod
    def query(self) -> Select:
        """Build the select() for the related rows."""

    def get(self) -> list:
        return list(self.session.scalars(self.query()).all())

    def first(self):
        return self.session.scalars(self.query().limit(1)).first()

    def __repr__(self):
        return (f"<{type(self).__name__} {type(self.parent).__name__} -> "
                f"{getattr(self.related, '__name__', self.related)}>")


# ============================================================================
# One-to-one / one-to-many
# ============================================================================

class BelongsTo(SQLRelation):
    """Parent row holds the foreign key to the related (owner) row."""

    kind = RelationKind.BELONGS_TO

    def __init__(self, parent, related, foreign_key=None, owner_key=None):
        super().__init__(parent, related)
        self.foreign_key = foreign_key or f'{snake_case(related.__name__)}_id'
        self.owner_key = owner_key

    def query(self) -> Select:
        owner_key = self.owner_key or primary_key_name(self.related)
        return select(self.related).where(
            getattr(self.related, owner_key) == getattr(self.parent, self.foreign_key)
        )


class HasOneOrMany(SQLRelation):
    """Related rows hold the foreign key to the parent row."""

    kind = RelationKind.HAS_ONE_OR_MANY

    def __init__(self, parent, related, foreign_key=None, local_key=None):
        super().__init__(parent, related)
        self.foreign_key = foreign_key or f'{snake_case(type(parent).__name__)}_id'
        self.local_key = local_key

    def query(self) -> Select:
        local_key = self.local_key or primary_key_name(type(self.parent))
        return select(self.related).where(
            getattr(self.related, self.foreign_key) == getattr(self.parent, local_key)
        )


class HasOne(HasOneOrMany):
    kind = RelationKind.HAS_ONE


class HasMany(HasOneOrMany):
    kind = RelationKind.HAS_MANY


# ============================================================================
# Polymorphic
# ============================================================================

def morph_name(cls) -> str:
    """Value stored in a ``<name>_type`` column for ``cls``."""
    return cls.__name__


class MorphTo(SQLRelation):
    """
    Polymorphic owner: the parent stores ``<name>_type`` and ``<name>_id``.

    The related class is looked up by its morph name among the classes mapped
    by the parent's registry. With no type set the owner is unknown:
    ``related_class`` is None and there are no related rows.
    """

    kind = RelationKind.MORPH_TO

    def __init__(self, parent, name, morph_type=None, morph_id=None, owner_key=None):
        self.name = name
        self.morph_type = morph_type or f'{name}_type'
        self.morph_id = morph_id or f'{name}_id'
        self.owner_key = owner_key
        super().__init__(parent, self._resolve_related(parent))

    def _resolve_related(self, parent) -> Optional[type]:
        type_name = getattr(parent, self.morph_type)
        if not type_name:
            return None

        for mapper in sa_inspect(type(parent)).registry.mappers:
            if morph_name(mapper.class_) == type_name:
                return mapper.class_
        raise LookupError(f"Unknown morph type {type_name!r} for {type(parent).__name__}.{self.name}")

    @property
    def resolved(self) -> bool:
        return self.related is not None

    def get(self) -> list:
        if not self.resolved:
            return []
        return super().get()

    def first(self):
        if not self.resolved:
            return None
        return super().first()

    def query(self) -> Select:
        owner_key = self.owner_key or primary_key_name(self.related)
        return select(self.related).where(
            getattr(self.related, owner_key) == getattr(self.parent, self.morph_id)
        )


class MorphOneOrMany(SQLRelation):
    """Related rows store the parent's morph name and key."""

    kind = RelationKind.MORPH_ONE_OR_MANY

    def __init__(self, parent, related, name, morph_type=None, morph_id=None, local_key=None):
        super().__init__(parent, related)
        self.name = name
        self.morph_type = morph_type or f'{name}_type'
        self.morph_id = morph_id or f'{name}_id'
        self.local_key = local_key

    def query(self) -> Select:
        local_key = self.local_key or primary_key_name(type(self.parent))
        return select(self.related).where(
            getattr(self.related, self.morph_id) == getattr(self.parent, local_key),
            getattr(self.related, self.morph_type) == morph_name(type(self.parent)),
        )


class MorphOne(MorphOneOrMany):
    kind = RelationKind.MORPH_ONE


class MorphMany(MorphOneOrMany):
    kind = RelationKind.MORPH_MANY


# ============================================================================
# Many-to-many and "through" chains
# ============================================================================

class BelongsToMany(SQLRelation):
    """Parent and related rows linked through a pivot table."""

    kind = RelationKind.BELONGS_TO_MANY

    def __init__(self, parent, related, table=None, foreign_pivot_key=None,
                 related_pivot_key=None, parent_key=None, related_key=None):
        super().__init__(parent, related)
        parent_name = snake_case(type(parent).__name__)
        related_name = snake_case(related.__name__)
        self.table = table or '_'.join(sorted([parent_name, related_name]))
        self.foreign_pivot_key = foreign_pivot_key or f'{parent_name}_id'
        self.related_pivot_key = related_pivot_key or f'{related_name}_id'
        self.parent_key = parent_key
        self.related_key = related_key

    def pivot_table(self):
        tables = type(self.parent).metadata.tables
        if self.table not in tables:
            raise LookupError(f"Pivot table {self.table!r} is not defined")
        return tables[self.table]

    def query(self) -> Select:
        pivot = self.pivot_table()
        parent_key = self.parent_key or primary_key_name(type(self.parent))
        related_key = self.related_key or primary_key_name(self.related)
        return (
            select(self.related)
            .join(pivot, pivot.c[self.related_pivot_key] == getattr(self.related, related_key))
            .where(pivot.c[self.foreign_pivot_key] == getattr(self.parent, parent_key))
        )


class HasManyThrough(SQLRelation):
    """Related rows reached through an intermediate model."""

    kind = RelationKind.HAS_MANY_THROUGH

    def __init__(self, parent, related, through, first_key=None, second_key=None,
                 local_key=None, second_local_key=None):
        super().__init__(parent, related)
        self.through = through
        self.first_key = first_key or f'{snake_case(type(parent).__name__)}_id'
        self.second_key = second_key or f'{snake_case(through.__name__)}_id'
        self.local_key = local_key
        self.second_local_key = second_local_key

    def query(self) -> Select:
        local_key = self.local_key or primary_key_name(type(self.parent))
        second_local_key = self.second_local_key or primary_key_name(self.through)
        return (
            select(self.related)
            .join(self.through,
                  getattr(self.through, second_local_key) == getattr(self.related, self.second_key))
            .where(getattr(self.through, self.first_key) == getattr(self.parent, local_key))
        )


class HasOneThrough(HasManyThrough):
    kind = RelationKind.HAS_ONE_THROUGH
