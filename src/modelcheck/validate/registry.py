"""
Relation edges observed during a validation run.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..base import qualified_name
from ..relations.kinds import RelationKind


def owner_name(cls: Optional[type]) -> str:
    """Qualified name of a relation target; an unresolved MorphTo owner is 'any model'."""
    return qualified_name(cls) if cls is not None else 'any model'


@dataclass(frozen=True)
class RelationEdge:
    """
    ``source_class.method_name()`` is a ``relation_kind`` relation to
    ``target_class``. A MorphTo whose owner type was not set has no target
    class and stands for a relation to any model.
    """

    source_class: type
    method_name: str
    relation_kind: Optional[RelationKind]
    target_class: Optional[type]

    @property
    def polymorphic(self) -> bool:
        return self.target_class is None and self.relation_kind is RelationKind.MORPH_TO

    def __str__(self):
        return (f"{qualified_name(self.source_class)}.{self.method_name}() "
                f"-[{self.relation_kind}]-> {owner_name(self.target_class)}")


class RelationRegistry:
    """
    Append-only store of relation edges, keyed by source class.

    Edges of a class keep the order they were added in (method scan order).
    """

    def __init__(self):
        self._edges: Dict[type, List[RelationEdge]] = {}

    def add(self, edge: RelationEdge) -> RelationEdge:
        self._edges.setdefault(edge.source_class, []).append(edge)
        return edge

    def edges_from(self, cls: type) -> Tuple[RelationEdge, ...]:
        return tuple(self._edges.get(cls, ()))

    def edges_between(self, source: type, target: type,
                      include_polymorphic: bool = False) -> Tuple[RelationEdge, ...]:
        """
        Edges from ``source`` pointing at ``target``. With include_polymorphic,
        unresolved MorphTo edges of ``source`` count as pointing at ``target``.
        """
        return tuple(
            e for e in self._edges.get(source, ())
            if e.target_class is target or (include_polymorphic and e.polymorphic)
        )

    def edges_to(self, target: type) -> Tuple[RelationEdge, ...]:
        """Edges from any class whose target is exactly ``target``."""
        return tuple(e for e in self.edges() if e.target_class is target)

    def classes(self) -> Tuple[type, ...]:
        return tuple(self._edges)

    def edges(self) -> Iterator[RelationEdge]:
        for edges in self._edges.values():
            yield from edges

    def __iter__(self) -> Iterator[Tuple[type, Tuple[RelationEdge, ...]]]:
        for cls, edges in self._edges.items():
            yield cls, tuple(edges)

    def __len__(self):
        return sum(len(edges) for edges in self._edges.values())

    def __repr__(self):
        return f"<RelationRegistry {len(self._edges)} classes, {len(self)} edges>"
