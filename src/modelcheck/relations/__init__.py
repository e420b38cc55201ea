"""
Relations returned by model relation methods, and their kinds.
"""

from .kinds import RelationKind, EXPECTED_INVERSE_KINDS, expected_inverse_kinds, format_kinds
from .relation import (
    Relation,
    SQLRelation,
    BelongsTo,
    HasOneOrMany,
    HasOne,
    HasMany,
    MorphTo,
    MorphOneOrMany,
    MorphOne,
    MorphMany,
    BelongsToMany,
    HasManyThrough,
    HasOneThrough,
    morph_name,
    primary_key_name,
    resolve_session,
    snake_case,
)
