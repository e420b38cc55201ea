"""
Tests for the base-type checks on model classes.
"""

import pytest

from modelcheck import InstanceKindError, Model, ValidationConfig
from modelcheck.validate.instance import validate_instance
from fixture_models.base import AbstractModel
from fixture_models.child_model import ChildModel
from fixture_models.parent_model import ParentModel
from fixture_not_models.not_model import NotModel


class TestAllowedBaseTypes:

    def test_models_pass_by_default(self):
        """Any mapped class is a Model, inheriting from it or not."""
        config = ValidationConfig()
        assert validate_instance(ParentModel, config) is True
        assert validate_instance(ChildModel, config) is True

    def test_parent_passes_child_does_not(self):
        """ParentModel extends AbstractModel, ChildModel does not."""
        config = ValidationConfig(allowed_base_types=[AbstractModel])
        assert validate_instance(ParentModel, config) is True

        with pytest.raises(InstanceKindError) as exc_info:
            validate_instance(ChildModel, config)
        assert str(exc_info.value) == (
            'fixture_models.child_model.ChildModel must be a subclass of fixture_models.base.AbstractModel'
        )

    def test_message_names_all_allowed_types(self):
        config = ValidationConfig(allowed_base_types=[AbstractModel, Model])
        with pytest.raises(InstanceKindError) as exc_info:
            validate_instance(NotModel, config)
        assert str(exc_info.value) == (
            'fixture_not_models.not_model.NotModel must be a subclass of '
            'fixture_models.base.AbstractModel,modelcheck.base.Model'
        )


class TestRequiredBaseTypePerModel:

    def test_required_type_overrides_allowed_types(self):
        config = ValidationConfig(
            allowed_base_types=[AbstractModel],
            required_base_type_per_model={ChildModel: Model},
        )
        assert validate_instance(ParentModel, config) is True
        assert validate_instance(ChildModel, config) is True

    def test_required_type_wins_even_when_allowed_types_match(self):
        config = ValidationConfig(required_base_type_per_model={ChildModel: AbstractModel})
        with pytest.raises(InstanceKindError, match='ChildModel must be a subclass of fixture_models.base.AbstractModel'):
            validate_instance(ChildModel, config)

    def test_required_type_keyed_by_name(self):
        config = ValidationConfig(
            required_base_type_per_model={'fixture_models.parent_model.ParentModel': AbstractModel},
        )
        assert validate_instance(ParentModel, config) is True


class TestNonModels:

    def test_non_model_fails(self):
        with pytest.raises(InstanceKindError, match='NotModel must be a subclass of modelcheck.base.Model'):
            validate_instance(NotModel, ValidationConfig())

    def test_non_model_skipped_when_allowed(self):
        config = ValidationConfig(allow_non_models=True)
        assert validate_instance(NotModel, config) is False

    def test_models_still_fail_when_non_models_allowed(self):
        """allow_non_models does not excuse a model failing its allowed types."""
        config = ValidationConfig(allowed_base_types=[AbstractModel], allow_non_models=True)
        with pytest.raises(InstanceKindError):
            validate_instance(ChildModel, config)
