"""
Back-Relation Verifier

Every relation from A to B should be answered by a relation from B back to
A, of a kind that structurally matches (see relations.kinds). Runs once,
after every class has been scanned, over the whole registry.
"""

import logging
from typing import Iterator, List

from ..base import qualified_name
from ..config import ValidationConfig
from ..exceptions import (
    BackRelationError,
    IncompatibleBackRelationError,
    MissingBackRelationError,
    UnknownRelationKindError,
)
from ..relations.kinds import RelationKind, expected_inverse_kinds, format_kinds
from .registry import RelationEdge, RelationRegistry, owner_name

logger = logging.getLogger(__name__)


def _label(edge: RelationEdge) -> str:
    return f"{qualified_name(edge.source_class)}.{edge.method_name}()"


def _polymorphic_target(edge: RelationEdge) -> bool:
    """MorphOne/MorphMany edges may be answered by an unresolved MorphTo."""
    return RelationKind.MORPH_TO in expected_inverse_kinds(edge.relation_kind)


def check_edge(edge: RelationEdge, registry: RelationRegistry, config: ValidationConfig):
    """
    Check a single edge has a back-relation.

    An unresolved MorphTo edge (owner type not set) is answered by any
    relation pointing at its class.

    Raises:
        MissingBackRelationError: nothing on the target points back.
        UnknownRelationKindError: the edge's kind has no known inverse kinds
            (only when back-relation type validation is enabled).
        IncompatibleBackRelationError: something points back, but no
            back-relation has an expected inverse kind.
    """
    source = qualified_name(edge.source_class)
    target = owner_name(edge.target_class)

    if edge.polymorphic:
        back_edges = registry.edges_to(edge.source_class)
        if not back_edges:
            raise MissingBackRelationError(
                f"{_label(edge)} is a {edge.relation_kind} relation with no owner type set, "
                f"but no model has a relation to {source}",
                edge,
            )
    else:
        back_edges = registry.edges_between(edge.target_class, edge.source_class,
                                            include_polymorphic=_polymorphic_target(edge))
        if not back_edges:
            raise MissingBackRelationError(
                f"{_label(edge)} is a {edge.relation_kind} relation to {target}, "
                f"but {target} has no relation back to {source}",
                edge,
            )

    if not config.back_relation_type_validation_enabled:
        return

    expected = expected_inverse_kinds(edge.relation_kind)
    if not expected:
        raise UnknownRelationKindError(
            f"{_label(edge)} returns unknown relation kind {edge.relation_kind!r}",
            edge,
        )

    if any(back.relation_kind in expected for back in back_edges):
        return

    found = ', '.join(f"{_label(back)} ({back.relation_kind})" for back in back_edges)
    raise IncompatibleBackRelationError(
        f"{_label(edge)} is a {edge.relation_kind} relation to {target}, "
        f"expected a back-relation of kind {format_kinds(expected)} but found {found}",
        edge,
    )


def iter_back_relation_errors(registry: RelationRegistry,
                              config: ValidationConfig) -> Iterator[BackRelationError]:
    """Yield one error per edge failing its back-relation check."""
    for cls, edges in registry:
        if config.skips_all_back_relations(cls):
            logger.debug(f"Skipping back-relations of {qualified_name(cls)}")
            continue

        for edge in edges:
            if config.skips_back_relation(cls, edge.method_name):
                logger.debug(f"Skipping back-relation of {_label(edge)}")
                continue
            try:
                check_edge(edge, registry, config)
            except BackRelationError as e:
                yield e


def verify_back_relations(registry: RelationRegistry, config: ValidationConfig) -> List[BackRelationError]:
    """Check every edge in ``registry``; returns the errors found."""
    return list(iter_back_relation_errors(registry, config))
