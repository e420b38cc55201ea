"""
Configuration management for modelcheck.

Settings are held in a ValidationConfig, built in code or loaded from YAML::

    model_paths:
      - app/models
    allowed_base_types:
      - app.models.base.Base
    allow_non_models: false
    required_base_type_per_model:
      app.models.user.User: app.auth.UserMixin
    ignored_methods_per_namespace:
      sqlalchemy: '*'
      app.models.mixins: [soft_delete]
    back_relation_validation_enabled: true
    back_relation_type_validation_enabled: true
    skip_back_relation_methods_per_model:
      app.models.audit.AuditLog: '*'
      app.models.user.User: [created_posts]
"""

import importlib
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Dict, FrozenSet, List, Optional, Tuple

import yaml
from dotenv import load_dotenv, find_dotenv

from .base import Model, qualified_name
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

ALL_METHODS = '*'

DEFAULT_MODEL_PATHS = ['models']

# Methods declared by the ORM and by modelcheck itself are never relations.
DEFAULT_IGNORED_NAMESPACES = {
    'sqlalchemy': ALL_METHODS,
    'modelcheck': ALL_METHODS,
}


def _class_key(cls_or_name) -> str:
    if isinstance(cls_or_name, type):
        return qualified_name(cls_or_name)
    return str(cls_or_name)


def _method_set(methods) -> FrozenSet[str]:
    if isinstance(methods, str):
        return frozenset({methods})
    return frozenset(methods or ())


@dataclass
class ValidationConfig:
    """Policy knobs for a validation run."""

    model_paths: List[str] = field(default_factory=lambda: list(DEFAULT_MODEL_PATHS))
    allowed_base_types: Tuple[type, ...] = (Model,)
    allow_non_models: bool = False
    required_base_type_per_model: Dict[str, type] = field(default_factory=dict)
    ignored_methods_per_namespace: Dict[str, FrozenSet[str]] = field(
        default_factory=lambda: dict(DEFAULT_IGNORED_NAMESPACES)
    )
    back_relation_validation_enabled: bool = True
    back_relation_type_validation_enabled: bool = True
    skip_back_relation_methods_per_model: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    include_mapped_relationships: bool = False

    def __post_init__(self):
        self.model_paths = list(self.model_paths or DEFAULT_MODEL_PATHS)
        self.allowed_base_types = tuple(self.allowed_base_types)
        self.required_base_type_per_model = {
            _class_key(k): v for k, v in self.required_base_type_per_model.items()
        }
        self.ignored_methods_per_namespace = {
            prefix: _method_set(methods)
            for prefix, methods in self.ignored_methods_per_namespace.items()
        }
        self.skip_back_relation_methods_per_model = {
            _class_key(k): _method_set(v) for k, v in self.skip_back_relation_methods_per_model.items()
        }

    def required_base_type_for(self, cls) -> Optional[type]:
        return self.required_base_type_per_model.get(_class_key(cls))

    def is_method_ignored(self, namespace: str, method_name: str) -> bool:
        """Check if a method declared in module ``namespace`` is excluded."""
        for prefix, methods in self.ignored_methods_per_namespace.items():
            if namespace.startswith(prefix) and (ALL_METHODS in methods or method_name in methods):
                return True
        return False

    def back_relation_skips(self, cls) -> FrozenSet[str]:
        return self.skip_back_relation_methods_per_model.get(_class_key(cls), frozenset())

    def skips_all_back_relations(self, cls) -> bool:
        return ALL_METHODS in self.back_relation_skips(cls)

    def skips_back_relation(self, cls, method_name: str) -> bool:
        skips = self.back_relation_skips(cls)
        return ALL_METHODS in skips or method_name in skips


# ============================================================================
# Loading
# ============================================================================

def resolve_object(dotted_name: str):
    """Import 'package.module.Name' and return Name."""
    module_name, _, attr = dotted_name.rpartition('.')
    if not module_name:
        raise ConfigError(f"Expected a dotted name like 'package.module.Name', got {dotted_name!r}")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Cannot resolve {dotted_name!r}: {e}") from e


def _resolve_type(value):
    obj = resolve_object(value) if isinstance(value, str) else value
    if not isinstance(obj, type):
        raise ConfigError(f"{value!r} is not a class")
    return obj


def config_from_dict(data: dict) -> ValidationConfig:
    """Build a ValidationConfig from plain (YAML/JSON) data."""
    known = {f.name for f in fields(ValidationConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(sorted(unknown))}")

    kwargs = dict(data)
    if 'allowed_base_types' in kwargs:
        kwargs['allowed_base_types'] = tuple(_resolve_type(t) for t in kwargs['allowed_base_types'] or ())
    if 'required_base_type_per_model' in kwargs:
        kwargs['required_base_type_per_model'] = {
            name: _resolve_type(t) for name, t in (kwargs['required_base_type_per_model'] or {}).items()
        }
    for key in ('ignored_methods_per_namespace', 'skip_back_relation_methods_per_model'):
        if key in kwargs and not isinstance(kwargs[key] or {}, dict):
            raise ConfigError(f"{key} must be a mapping")
        if key in kwargs:
            kwargs[key] = kwargs[key] or {}

    return ValidationConfig(**kwargs)


def load_config(path) -> ValidationConfig:
    """Load a ValidationConfig from a YAML file."""
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded config from {path}")
    return config_from_dict(data)


def config_from_env() -> ValidationConfig:
    """
    Load the config named by MODELCHECK_CONFIG (from the environment or a
    .env file), or the defaults when unset.
    """
    env_file = find_dotenv(usecwd=True)
    load_dotenv(env_file)
    logger.debug(f"Loaded environment from {env_file}")

    path = os.getenv('MODELCHECK_CONFIG')
    if path:
        return load_config(path)
    return ValidationConfig()
