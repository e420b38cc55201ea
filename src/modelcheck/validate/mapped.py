"""
SQLAlchemy relationship() attributes as relations.

Declarative models usually declare relations as mapped attributes rather
than methods. MappedRelationship gives such an attribute the Relation
capability so it is executed and back-relation checked like a relation
method. The relation kind comes from the relationship direction.
"""

from typing import List

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.orm import RelationshipDirection, RelationshipProperty, aliased
from sqlalchemy.sql import Select

from ..base import is_mapped_class
from ..exceptions import NoSessionError
from ..relations.kinds import RelationKind
from ..relations.relation import Relation
from ..session import current_session


def relationship_kind(prop: RelationshipProperty) -> RelationKind:
    if prop.direction is RelationshipDirection.MANYTOONE:
        return RelationKind.BELONGS_TO
    if prop.direction is RelationshipDirection.MANYTOMANY:
        return RelationKind.BELONGS_TO_MANY
    return RelationKind.HAS_MANY if prop.uselist else RelationKind.HAS_ONE


class MappedRelationship(Relation):
    """A relationship() of a mapped class."""

    def __init__(self, owner: type, prop: RelationshipProperty):
        self.owner = owner
        self.prop = prop
        self.kind = relationship_kind(prop)

    @property
    def key(self) -> str:
        return self.prop.key

    @property
    def related_class(self) -> type:
        return self.prop.mapper.class_

    @property
    def registers_edge(self) -> bool:
        """viewonly relationships need no back-relation."""
        return not self.prop.viewonly

    def query(self) -> Select:
        # Aliased so self-referential relationships join the table to itself.
        target = aliased(self.related_class)
        return (
            select(target)
            .select_from(self.owner)
            .join(getattr(self.owner, self.key).of_type(target))
            .limit(1)
        )

    def get(self) -> list:
        session = current_session()
        if session is None:
            raise NoSessionError(f"No database session bound for {self.owner.__name__}")
        return list(session.scalars(self.query()).all())

    def __repr__(self):
        return f"<MappedRelationship {self.owner.__name__}.{self.key} -> {self.related_class.__name__}>"


def mapped_relationships(cls: type) -> List[MappedRelationship]:
    """relationship() attributes of a mapped class, in mapper order."""
    if not is_mapped_class(cls):
        return []
    return [MappedRelationship(cls, prop) for prop in sa_inspect(cls).relationships]
