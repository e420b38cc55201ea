"""
ModelValidator: runs every model check over a set of classes.

Usage in a test suite:

    def test_models(session):
        validator = ModelValidator(session=session)
        validator.assert_models([User, Post, Comment])
        validator.sink.raise_for_failures()

or, inside a unittest.TestCase, report straight to the test case:

    ModelValidator(sink=UnitTestSink(self), session=self.session).assert_models()
"""

import logging
from contextlib import nullcontext
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from .base import qualified_name
from .config import ValidationConfig, resolve_object
from .discovery import list_model_classes
from .exceptions import InstanceKindError, InvalidRelationError
from .reflection import MethodInfo, declared_methods, get_method
from .session import bind_session
from .sinks import AssertionSink, CollectingSink
from .validate.back_relations import verify_back_relations
from .validate.classifier import ClassifiedRelation, MethodClassifier
from .validate.executor import execute
from .validate.instance import validate_instance
from .validate.mapped import MappedRelationship, mapped_relationships
from .validate.registry import RelationRegistry

logger = logging.getLogger(__name__)


class ModelValidator:
    """
    Validates model classes and the relations between them.

    Args:
        config: validation policy (defaults to ValidationConfig()).
        sink: where passes and failures are reported (defaults to a
            CollectingSink).
        session: session relation queries run on. Without one, relations
            of transient instances fail with NoSessionError.
        class_lister: callable listing the classes under a directory, used
            when assert_models() is given no classes.
    """

    def __init__(self, config: Optional[ValidationConfig] = None,
                 sink: Optional[AssertionSink] = None,
                 session: Optional[Session] = None,
                 class_lister: Callable[[str], Iterable[type]] = list_model_classes):
        self.config = config if config is not None else ValidationConfig()
        self.sink = sink if sink is not None else CollectingSink()
        self.session = session
        self.class_lister = class_lister
        self.registry = RelationRegistry()

    # ------------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------------
    def assert_models(self, model_classes: Optional[Iterable] = None) -> RelationRegistry:
        """
        Validate the given classes (classes or dotted names), or every class
        found under config.model_paths, then check back-relations.

        Returns:
            The registry of relation edges seen during this run.
        """
        return self.assert_classes(self.resolve_classes(model_classes))

    def assert_classes(self, classes: List[type]) -> RelationRegistry:
        """
        Validate exactly ``classes`` (already resolved, possibly none), then
        check back-relations.
        """
        self.registry = RelationRegistry()

        logger.info(f"Validating {len(classes)} model class(es)")
        for cls in classes:
            self.assert_model(cls)

        if self.config.back_relation_validation_enabled:
            self.assert_back_relations()
        return self.registry

    def resolve_classes(self, model_classes: Optional[Iterable] = None) -> List[type]:
        model_classes = list(model_classes or ())
        if model_classes:
            return [resolve_object(c) if isinstance(c, str) else c for c in model_classes]

        classes = []
        for path in self.config.model_paths:
            for cls in self.class_lister(path):
                if cls not in classes:
                    classes.append(cls)
        return classes

    def assert_model(self, cls: type) -> None:
        if self.assert_model_instance(cls):
            self.assert_model_methods(cls)

    def assert_model_instance(self, cls: type) -> bool:
        """Returns True if the methods of ``cls`` should be scanned."""
        try:
            validated = validate_instance(cls, self.config)
        except InstanceKindError as e:
            self.sink.fail(e)
            return False

        if validated:
            self.sink.assert_true(True, f"{qualified_name(cls)} is a valid model")
        return validated

    def assert_model_methods(self, cls: type) -> None:
        for method in declared_methods(cls):
            self._assert_method(cls, method)

        if self.config.include_mapped_relationships:
            for relationship in mapped_relationships(cls):
                self._assert_mapped_relationship(cls, relationship)

    def assert_model_method(self, cls: type, method_name: str) -> None:
        method = get_method(cls, method_name)
        if method is None:
            logger.debug(f"{qualified_name(cls)} has no method {method_name}()")
            return
        self._assert_method(cls, method)

    def assert_back_relations(self) -> None:
        errors = verify_back_relations(self.registry, self.config)
        logger.info(f"Checked back-relations of {len(self.registry)} relation(s): {len(errors)} failure(s)")
        for error in errors:
            self.sink.fail(error)
        if not errors:
            self.sink.assert_true(True, "All relations have back-relations")

    # ------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------
    def _tracking_registry(self) -> Optional[RelationRegistry]:
        if self.config.back_relation_validation_enabled:
            return self.registry
        return None

    def _bound(self):
        if self.session is None:
            return nullcontext()
        return bind_session(self.session)

    def _rollback(self) -> None:
        if self.session is not None:
            self.session.rollback()

    def _assert_method(self, cls: type, method: MethodInfo) -> None:
        classifier = MethodClassifier(self.config, self._tracking_registry())
        with self._bound():
            try:
                classified = classifier.classify_method(cls, method)
                if not classified:
                    logger.debug(f"Skipping: {classified.reason}")
                    return
                execute(classified)
            except InvalidRelationError as e:
                self._rollback()
                self.sink.fail(e)
                return

        self.sink.assert_true(True, f"{classified.label} is a valid {classified.kind} relation")

    def _assert_mapped_relationship(self, cls: type, relationship: MappedRelationship) -> None:
        classified = ClassifiedRelation(
            cls, relationship.key, relationship, relationship.kind, relationship.related_class
        )
        registry = self._tracking_registry()
        if registry is not None and relationship.registers_edge:
            registry.add(classified.edge())

        with self._bound():
            try:
                execute(classified)
            except InvalidRelationError as e:
                self._rollback()
                self.sink.fail(e)
                return

        self.sink.assert_true(True, f"{classified.label} is a valid {classified.kind} relationship")


def run(model_classes: Optional[Iterable] = None, config: Optional[ValidationConfig] = None,
        sink: Optional[AssertionSink] = None, session: Optional[Session] = None) -> RelationRegistry:
    """Run a full validation with a fresh ModelValidator."""
    return ModelValidator(config=config, sink=sink, session=session).assert_models(model_classes)
