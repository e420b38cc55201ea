"""
Tests for method reflection on model classes.
"""

from typing import Optional

from modelcheck import HasMany
from modelcheck.reflection import (
    MISSING,
    declared_methods,
    get_method,
    required_parameter_count,
    return_annotation,
)
from fixture_blog.models import User
from fixture_models.parent_model import ParentModel


class Sample:
    def no_args(self):
        pass

    def one_arg(self, a):
        pass

    def defaulted(self, a=1, *args, b=2, **kwargs):
        pass

    def keyword_only(self, *, key):
        pass

    def typed(self) -> HasMany:
        pass

    def forward_ref(self) -> 'NotDefinedAnywhere':
        pass

    @property
    def prop(self):
        return 1

    @staticmethod
    def static():
        pass

    @classmethod
    def klass(cls):
        pass

    def _private(self):
        pass


class SubSample(Sample):
    def one_arg(self, a=None):
        pass

    def extra(self) -> Optional[HasMany]:
        pass


class TestRequiredParameters:

    def test_counts(self):
        assert required_parameter_count(Sample.no_args) == 0
        assert required_parameter_count(Sample.one_arg) == 1
        assert required_parameter_count(Sample.defaulted) == 0
        assert required_parameter_count(Sample.keyword_only) == 1


class TestReturnAnnotation:

    def test_missing(self):
        assert return_annotation(Sample.no_args) is MISSING

    def test_resolved(self):
        assert return_annotation(Sample.typed) is HasMany

    def test_unresolvable_forward_ref(self):
        assert return_annotation(Sample.forward_ref) is MISSING


class TestDeclaredMethods:

    def test_only_public_instance_methods(self):
        names = [m.name for m in declared_methods(Sample)]
        assert names == ['no_args', 'one_arg', 'defaulted', 'keyword_only', 'typed', 'forward_ref']

    def test_subclass_first_and_overrides_once(self):
        methods = declared_methods(SubSample)
        names = [m.name for m in methods]
        assert names[:2] == ['one_arg', 'extra']
        assert names.count('one_arg') == 1

        one_arg = methods[0]
        assert one_arg.declaring_class is SubSample
        assert one_arg.required_parameters == 0

    def test_namespace_is_declaring_module(self):
        methods = {m.name: m for m in declared_methods(ParentModel)}
        assert methods['children'].namespace == 'fixture_models.parent_model'
        # Relation builders come from the mixin
        assert methods['has_many'].namespace == 'modelcheck.base'

    def test_model_methods(self):
        names = [m.name for m in declared_methods(User)]
        assert names[:5] == ['country', 'posts', 'avatar', 'display_name', 'latest_posts']


class TestGetMethod:

    def test_existing(self):
        method = get_method(ParentModel, 'method_has_input_params')
        assert method.required_parameters == 1
        assert method.return_annotation is str

    def test_inherited(self):
        assert get_method(SubSample, 'typed').declaring_class is Sample

    def test_missing_or_not_a_method(self):
        assert get_method(ParentModel, 'method_doesnt_exist') is None
        assert get_method(Sample, 'prop') is None
        assert get_method(Sample, 'static') is None
        assert get_method(Sample, '__init__') is None
