"""
Method Classifier

Decides whether a model method is a relation method. Checks run cheapest
first and stop at the first one that rules the method out:

1. The method must take no required arguments.
2. It must not be excluded by an ignored-namespace rule.
3. A declared return type, when it is a plain class, must be a Relation.
   Union/Optional return types are not inspected and the method is skipped.
4. Called on a fresh instance, it must return a Relation. Its related class
   must be a class, except for a MorphTo whose owner type is not set yet.

Only step 4 calls the method. A method that gets there and returns a
Relation is classified, and its edge is recorded in the registry when one
is given.
"""

import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..base import qualified_name
from ..config import ValidationConfig
from ..exceptions import InvalidRelationError
from ..reflection import MISSING, MethodInfo, get_method
from ..relations.kinds import RelationKind
from ..relations.relation import Relation
from .registry import RelationEdge, RelationRegistry, owner_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotApplicable:
    """The method is not a relation method (or cannot be tested)."""

    reason: str

    def __bool__(self):
        return False


@dataclass(frozen=True)
class ClassifiedRelation:
    """A method that returned a relation when called."""

    source_class: type
    method_name: str
    relation: Relation
    kind: Optional[RelationKind]
    target_class: Optional[type]

    @property
    def label(self) -> str:
        return f"{qualified_name(self.source_class)}.{self.method_name}()"

    def edge(self) -> RelationEdge:
        return RelationEdge(self.source_class, self.method_name, self.kind, self.target_class)


Classification = Union[NotApplicable, ClassifiedRelation]


def declared_return_verdict(annotation) -> Optional[bool]:
    """
    What a return annotation says about a method returning a Relation.

    Returns:
        True/False for a plain class that is/is not a Relation,
        False for Union/Optional annotations (skipped, not inspected),
        None when there is nothing to go on (no annotation, Any, TypeVar...).
    """
    if annotation is MISSING or annotation is Any:
        return None

    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return False
    if origin is not None:
        annotation = origin

    if isinstance(annotation, type):
        return issubclass(annotation, Relation)
    return None


class MethodClassifier:
    """Classifies model methods; records relation edges in ``registry``."""

    def __init__(self, config: ValidationConfig, registry: Optional[RelationRegistry] = None):
        self.config = config
        self.registry = registry

    def classify(self, cls: type, method_name: str) -> Classification:
        method = get_method(cls, method_name)
        if method is None:
            return NotApplicable(f"{qualified_name(cls)} has no method {method_name}()")
        return self.classify_method(cls, method)

    def classify_method(self, cls: type, method: MethodInfo) -> Classification:
        """
        Classify ``method`` as seen on ``cls``.

        Raises:
            InvalidRelationError: if the class cannot be instantiated or the
                method raises when called.
        """
        label = f"{qualified_name(cls)}.{method.name}()"

        if method.required_parameters > 0:
            return NotApplicable(f"{label} requires {method.required_parameters} argument(s)")

        if self.config.is_method_ignored(method.namespace, method.name):
            return NotApplicable(f"{label} is ignored for namespace {method.namespace}")

        if declared_return_verdict(method.return_annotation) is False:
            return NotApplicable(f"{label} is declared to return {method.return_annotation!r}")

        try:
            value = getattr(cls(), method.name)()
            if not isinstance(value, Relation):
                return NotApplicable(f"{label} returned {type(value).__name__}")
            kind = getattr(value, 'kind', None)
            target = value.related_class
            if not isinstance(target, type) and not (target is None and kind is RelationKind.MORPH_TO):
                raise TypeError(f"related_class is not a class: {target!r}")
        except Exception as e:
            raise InvalidRelationError(f"{label} is invalid: {e}") from e

        classified = ClassifiedRelation(cls, method.name, value, kind, target)
        if self.registry is not None:
            self.registry.add(classified.edge())
        logger.debug(f"{label} is a {kind} relation to {owner_name(target)}")
        return classified
