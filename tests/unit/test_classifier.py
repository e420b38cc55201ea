"""
Tests for MethodClassifier: which model methods count as relation methods.
"""

from typing import Optional

import pytest

from modelcheck import (
    ClassifiedRelation,
    HasMany,
    InvalidRelationError,
    MethodClassifier,
    NotApplicable,
    RelationKind,
    RelationRegistry,
    ValidationConfig,
)
from modelcheck.reflection import MISSING
from modelcheck.validate.classifier import declared_return_verdict
import fixture_models.parent_model
from fixture_blog.models import Comment, Country, Post, User
from fixture_broken.models import Book, ShapelessRelation
from fixture_models.child_model import ChildModel
from fixture_models.parent_model import ParentModel


@pytest.fixture
def classifier():
    return MethodClassifier(ValidationConfig())


class TestDeclaredReturnVerdict:

    def test_no_annotation(self):
        assert declared_return_verdict(MISSING) is None

    def test_relation_class(self):
        assert declared_return_verdict(HasMany) is True

    def test_other_class(self):
        assert declared_return_verdict(str) is False
        assert declared_return_verdict(int) is False

    def test_optional_is_skipped(self):
        assert declared_return_verdict(Optional[HasMany]) is False
        assert declared_return_verdict(HasMany | None) is False

    def test_generic_uses_origin(self):
        assert declared_return_verdict(list[int]) is False


class TestRelationMethods:

    def test_annotated_relation(self, classifier):
        classified = classifier.classify(ChildModel, 'parent')
        assert isinstance(classified, ClassifiedRelation)
        assert classified.kind is RelationKind.BELONGS_TO
        assert classified.target_class is ParentModel
        assert classified.label == 'fixture_models.child_model.ChildModel.parent()'

    def test_unannotated_relation(self, classifier):
        """children() has no return type: it is only known to be a relation once called."""
        classified = classifier.classify(ParentModel, 'children')
        assert classified
        assert classified.kind is RelationKind.HAS_MANY
        assert classified.target_class is ChildModel

    def test_through_relation(self, classifier):
        classified = classifier.classify(Country, 'posts')
        assert classified.kind is RelationKind.HAS_MANY_THROUGH
        assert classified.target_class is Post

    def test_duck_typed_relation_has_no_kind(self, classifier):
        classified = classifier.classify(Book, 'shapeless')
        assert classified
        assert classified.kind is None


class TestNotApplicable:

    def test_required_parameters(self, classifier):
        result = classifier.classify(ParentModel, 'method_has_input_params')
        assert isinstance(result, NotApplicable)
        assert not result
        assert 'requires 1 argument(s)' in result.reason

    def test_returns_something_else(self, classifier):
        result = classifier.classify(ParentModel, 'method_doesnt_return_relation')
        assert not result
        assert result.reason.endswith('returned str')

    def test_declared_non_relation_is_not_called(self, classifier):
        result = classifier.classify(User, 'display_name')
        assert not result
        assert 'declared to return' in result.reason

    def test_optional_relation_is_skipped(self, classifier):
        assert not classifier.classify(User, 'latest_posts')

    def test_runtime_value_decides(self, classifier, monkeypatch):
        """The same method is a relation or not depending on what it returns."""
        monkeypatch.setattr(fixture_models.parent_model, 'time', lambda: 0)
        result = classifier.classify(ParentModel, 'children')
        assert isinstance(result, NotApplicable)
        assert 'returned bool' in result.reason

    def test_missing_method(self, classifier):
        result = classifier.classify(ParentModel, 'does_not_exist')
        assert not result
        assert 'has no method does_not_exist()' in result.reason

    def test_mixin_methods_are_ignored(self, classifier):
        result = classifier.classify(ParentModel, 'has_many')
        assert not result

    def test_ignored_method(self):
        config = ValidationConfig(ignored_methods_per_namespace={'fixture_models': ['children']})
        result = MethodClassifier(config).classify(ParentModel, 'children')
        assert not result
        assert 'ignored for namespace fixture_models.parent_model' in result.reason

    def test_ignored_namespace(self):
        config = ValidationConfig(ignored_methods_per_namespace={'fixture_models.child_model': '*'})
        assert not MethodClassifier(config).classify(ChildModel, 'parent')
        assert MethodClassifier(config).classify(ParentModel, 'children')


class TestInvalidRelations:

    def test_method_raising(self, classifier):
        with pytest.raises(InvalidRelationError) as exc_info:
            classifier.classify(Book, 'publisher')
        assert str(exc_info.value) == (
            'fixture_broken.models.Book.publisher() is invalid: publisher lookup failed'
        )


class TestRegistry:

    def test_relation_recorded(self):
        registry = RelationRegistry()
        classifier = MethodClassifier(ValidationConfig(), registry)

        classified = classifier.classify(ChildModel, 'parent')

        assert registry.edges_from(ChildModel) == (classified.edge(),)

    def test_non_relations_not_recorded(self):
        registry = RelationRegistry()
        classifier = MethodClassifier(ValidationConfig(), registry)

        classifier.classify(ParentModel, 'method_has_input_params')
        classifier.classify(ParentModel, 'method_doesnt_return_relation')

        assert len(registry) == 0

    def test_no_registry(self, classifier):
        assert classifier.registry is None
        assert classifier.classify(ChildModel, 'parent')


class TestUnresolvedMorphTo:

    def test_morph_to_without_owner_type(self, classifier):
        """A fresh Comment has no commentable_type: the owner is unknown, not Comment itself."""
        classified = classifier.classify(Comment, 'commentable')
        assert classified.kind is RelationKind.MORPH_TO
        assert classified.target_class is None
        assert classified.edge().polymorphic

    def test_missing_target_on_other_kinds(self, classifier, monkeypatch):
        monkeypatch.setattr(ShapelessRelation, 'related_class', property(lambda self: None))
        with pytest.raises(InvalidRelationError, match='related_class is not a class: None'):
            classifier.classify(Book, 'shapeless')
