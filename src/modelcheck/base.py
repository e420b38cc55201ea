from abc import ABC

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper, Session

from .relations.relation import (
    BelongsTo, BelongsToMany, HasMany, HasManyThrough, HasOne, HasOneThrough,
    MorphMany, MorphOne, MorphTo, resolve_session,
)


def is_mapped_class(cls) -> bool:
    """Check if ``cls`` is a class mapped by SQLAlchemy."""
    return isinstance(cls, type) and isinstance(sa_inspect(cls, raiseerr=False), Mapper)


def qualified_name(cls) -> str:
    """'package.module.ClassName' for a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


# ============================================================================
# Capabilities
# ============================================================================
class Model(ABC):
    """
    Capability: any class mapped by SQLAlchemy is a Model.

    issubclass(SomeMappedClass, Model) is True without inheriting from Model,
    the same way issubclass(list, collections.abc.Sized) is.
    """

    @classmethod
    def __subclasshook__(cls, C):
        if cls is Model and is_mapped_class(C):
            return True
        return NotImplemented


# ============================================================================
# Mixins
# ============================================================================
class SessionMixin:
    @property
    def session(self) -> Session:
        return resolve_session(self)


class RelationsMixin(SessionMixin):
    """Provides relation builders for model relation methods."""

    def belongs_to(self, related, foreign_key=None, owner_key=None) -> BelongsTo:
        return BelongsTo(self, related, foreign_key, owner_key)

    def has_one(self, related, foreign_key=None, local_key=None) -> HasOne:
        return HasOne(self, related, foreign_key, local_key)

    def has_many(self, related, foreign_key=None, local_key=None) -> HasMany:
        return HasMany(self, related, foreign_key, local_key)

    def morph_to(self, name, morph_type=None, morph_id=None, owner_key=None) -> MorphTo:
        return MorphTo(self, name, morph_type, morph_id, owner_key)

    def morph_one(self, related, name, morph_type=None, morph_id=None, local_key=None) -> MorphOne:
        return MorphOne(self, related, name, morph_type, morph_id, local_key)

    def morph_many(self, related, name, morph_type=None, morph_id=None, local_key=None) -> MorphMany:
        return MorphMany(self, related, name, morph_type, morph_id, local_key)

    def belongs_to_many(self, related, table=None, foreign_pivot_key=None, related_pivot_key=None,
                        parent_key=None, related_key=None) -> BelongsToMany:
        return BelongsToMany(self, related, table, foreign_pivot_key, related_pivot_key,
                             parent_key, related_key)

    def has_one_through(self, related, through, first_key=None, second_key=None,
                        local_key=None, second_local_key=None) -> HasOneThrough:
        return HasOneThrough(self, related, through, first_key, second_key,
                             local_key, second_local_key)

    def has_many_through(self, related, through, first_key=None, second_key=None,
                         local_key=None, second_local_key=None) -> HasManyThrough:
        return HasManyThrough(self, related, through, first_key, second_key,
                              local_key, second_local_key)
