"""
Relation kinds and their structurally valid inverses.

Every relation a model method can return has a kind. A relation from model A
to model B is answered by a "back-relation" from B to A whose kind must be
one of the expected inverse kinds below, e.g. a ``BelongsTo`` on the child is
answered by a ``HasMany`` (or ``HasOne``) on the parent.
"""

from enum import Enum
from typing import FrozenSet, Optional


class RelationKind(Enum):
    """Closed set of relation kinds."""

    BELONGS_TO = 'BelongsTo'
    HAS_ONE = 'HasOne'
    HAS_MANY = 'HasMany'
    HAS_ONE_OR_MANY = 'HasOneOrMany'
    MORPH_TO = 'MorphTo'
    MORPH_ONE = 'MorphOne'
    MORPH_MANY = 'MorphMany'
    MORPH_ONE_OR_MANY = 'MorphOneOrMany'
    BELONGS_TO_MANY = 'BelongsToMany'
    HAS_ONE_THROUGH = 'HasOneThrough'
    HAS_MANY_THROUGH = 'HasManyThrough'

    def __str__(self):
        return self.value


_HAS_ONE_OR_MANY = frozenset({
    RelationKind.HAS_ONE,
    RelationKind.HAS_MANY,
    RelationKind.HAS_ONE_OR_MANY,
})

_MORPH_ONE_OR_MANY = frozenset({
    RelationKind.MORPH_ONE,
    RelationKind.MORPH_MANY,
    RelationKind.MORPH_ONE_OR_MANY,
})

_THROUGH = frozenset({
    RelationKind.HAS_ONE_THROUGH,
    RelationKind.HAS_MANY_THROUGH,
})

EXPECTED_INVERSE_KINDS = {
    RelationKind.BELONGS_TO: _HAS_ONE_OR_MANY,
    RelationKind.HAS_ONE: frozenset({RelationKind.BELONGS_TO}),
    RelationKind.HAS_MANY: frozenset({RelationKind.BELONGS_TO}),
    RelationKind.HAS_ONE_OR_MANY: frozenset({RelationKind.BELONGS_TO}),
    RelationKind.MORPH_TO: _MORPH_ONE_OR_MANY,
    RelationKind.MORPH_ONE: frozenset({RelationKind.MORPH_TO}),
    RelationKind.MORPH_MANY: frozenset({RelationKind.MORPH_TO}),
    RelationKind.MORPH_ONE_OR_MANY: frozenset({RelationKind.MORPH_TO}),
    RelationKind.BELONGS_TO_MANY: frozenset({RelationKind.BELONGS_TO_MANY}),
    RelationKind.HAS_ONE_THROUGH: _THROUGH,
    RelationKind.HAS_MANY_THROUGH: _THROUGH,
}


def expected_inverse_kinds(kind: Optional[RelationKind]) -> FrozenSet[RelationKind]:
    """
    Get the kinds a back-relation for ``kind`` may have.

    Returns an empty set for anything that is not a known RelationKind
    (including None), which callers treat as an unknown relation kind.
    """
    if not isinstance(kind, RelationKind):
        return frozenset()
    return EXPECTED_INVERSE_KINDS.get(kind, frozenset())


def format_kinds(kinds) -> str:
    """Comma-separated, sorted kind names for messages."""
    return ','.join(sorted(str(k) for k in kinds))
